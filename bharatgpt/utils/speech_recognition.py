"""
多语言语音识别会话

浏览器执行识别，服务端根据上报的事件维护识别状态：
合并最终识别结果、在 no-speech 错误或意外结束后要求客户端延时重启。
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from bharatgpt.config.settings import settings

logger = logging.getLogger(__name__)

NO_SPEECH_ERROR = "no-speech"


@dataclass
class RecognitionConfig:
    lang: str
    continuous: bool = True
    interim_results: bool = True
    max_alternatives: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


LANGUAGE_RECOGNITION_CONFIGS: Dict[str, RecognitionConfig] = {
    "english": RecognitionConfig(lang="en-US"),
    "hindi": RecognitionConfig(lang="hi-IN"),
    "gujarati": RecognitionConfig(lang="gu-IN"),
}


class RecognitionAction(Enum):
    """服务端要求客户端执行的动作"""
    START = "start"        # 按配置开始识别
    RESTART = "restart"    # 延时后重新开始识别
    ERROR = "error"        # 上报错误，不再重启
    ENDED = "ended"        # 识别正常结束
    NONE = "none"          # 无需动作


@dataclass
class RecognitionEvent:
    action: RecognitionAction
    delay_ms: int = 0
    error: Optional[str] = None
    config: Optional[RecognitionConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "delay_ms": self.delay_ms,
            "error": self.error,
            "config": self.config.to_dict() if self.config else None,
        }


class RecognitionSession:
    """单个连接上的语音识别状态"""

    def __init__(self, supported: bool = True, restart_delay_ms: Optional[int] = None):
        self.supported = supported
        self.restart_delay_ms = restart_delay_ms if restart_delay_ms is not None else settings.RECOGNITION_RESTART_DELAY_MS
        self.is_listening = False
        self.language: Optional[str] = None
        self.config: Optional[RecognitionConfig] = None

    def start(self, language: str) -> Optional[RecognitionEvent]:
        """
        开始识别，已在识别中则先停止再按新语言开始

        Returns:
            RecognitionEvent: 开始动作；不支持识别时返回 None
        """
        if not self.supported:
            logger.error("当前客户端不支持语音识别")
            return None

        if language not in LANGUAGE_RECOGNITION_CONFIGS:
            raise ValueError(f"不支持的识别语言: {language}")

        if self.is_listening:
            self.stop()

        self.language = language
        self.config = LANGUAGE_RECOGNITION_CONFIGS[language]
        self.is_listening = True
        logger.info(f"语音识别开始: {language} ({self.config.lang})")
        return RecognitionEvent(action=RecognitionAction.START, config=self.config)

    def stop(self):
        """停止识别"""
        if self.is_listening:
            self.is_listening = False
            logger.info("语音识别停止")

    def handle_result(self, results: List[Dict[str, Any]], result_index: int = 0) -> Optional[str]:
        """
        合并识别结果

        Args:
            results: [{"transcript": str, "is_final": bool}, ...]
            result_index: 本次事件中第一个变化结果的下标

        Returns:
            str: 去除首尾空白的最终文本；只有中间结果时返回 None
        """
        final_transcript = ""
        for result in results[max(result_index, 0):]:
            if result.get("is_final"):
                final_transcript += str(result.get("transcript", ""))

        final_transcript = final_transcript.strip()
        if final_transcript:
            logger.debug(f"最终识别结果: {final_transcript}")
            return final_transcript
        return None

    def handle_error(self, error: str) -> RecognitionEvent:
        """
        处理识别错误

        no-speech 在识别中时要求延时重启，其他错误直接上报。
        """
        logger.warning(f"语音识别错误: {error}")
        was_listening = self.is_listening
        self.is_listening = False

        if error == NO_SPEECH_ERROR:
            if was_listening:
                # 重启期间仍视为在识别中
                self.is_listening = True
                return RecognitionEvent(
                    action=RecognitionAction.RESTART,
                    delay_ms=self.restart_delay_ms,
                    config=self.config,
                )
            return RecognitionEvent(action=RecognitionAction.NONE)

        return RecognitionEvent(action=RecognitionAction.ERROR, error=error)

    def handle_end(self) -> RecognitionEvent:
        """识别结束：仍应识别时要求重启，否则通知结束"""
        if self.is_listening:
            logger.info("语音识别意外结束，准备重启")
            return RecognitionEvent(
                action=RecognitionAction.RESTART,
                delay_ms=self.restart_delay_ms,
                config=self.config,
            )
        logger.info("语音识别已结束")
        return RecognitionEvent(action=RecognitionAction.ENDED)

    def available_languages(self) -> List[str]:
        languages = ["english"]
        if self.supported:
            languages.extend(["hindi", "gujarati"])
        return languages
