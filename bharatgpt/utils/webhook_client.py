import asyncio
import logging
import time
from typing import Any, Dict, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bharatgpt.config.settings import settings

logger = logging.getLogger(__name__)


class WebhookError(Exception):
    """工作流调用失败（未配置、网络错误、非2xx状态码或响应不是JSON）"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WebhookClient:
    """n8n 工作流 webhook 客户端，发送JSON并返回解析后的JSON"""

    def __init__(self, timeout: Optional[int] = None):
        self.timeout = timeout or settings.WEBHOOK_TIMEOUT
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @retry(
        stop=stop_after_attempt(max(1, settings.WEBHOOK_MAX_ATTEMPTS)),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(WebhookError),
        reraise=True,
    )
    def post_json(self, url: str, payload: Dict[str, Any]) -> Any:
        """
        POST JSON 到 webhook

        Args:
            url: webhook 完整地址，为空表示未配置
            payload: 请求体

        Returns:
            解析后的JSON（dict 或 list）

        Raises:
            WebhookError: 任何传输或解析失败
        """
        if not url:
            raise WebhookError("webhook地址未配置")

        start_time = time.time()
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.error(f"webhook调用超时({self.timeout}s): {url}")
            raise WebhookError(f"请求超时，超过{self.timeout}秒")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"webhook连接失败: {url}, {e}")
            raise WebhookError("网络连接错误")
        except requests.exceptions.RequestException as e:
            logger.error(f"webhook请求异常: {url}, {e}")
            raise WebhookError(f"请求异常: {e}")

        if not response.ok:
            logger.error(f"webhook返回错误状态码: {response.status_code}, {url}")
            raise WebhookError(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"webhook响应不是合法JSON: {response.text[:200]}")
            raise WebhookError("响应不是合法JSON", status_code=response.status_code)

        elapsed_time = time.time() - start_time
        logger.debug(f"webhook调用成功: {url}, 耗时: {elapsed_time:.2f}s")
        return data

    async def post_json_async(self, url: str, payload: Dict[str, Any]) -> Any:
        """在线程池中执行 post_json，避免阻塞事件循环"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.post_json(url, payload))
