#!/usr/bin/env python3
"""
聊天服务
将学生消息连同最近的对话上下文转发给 n8n 聊天工作流，整理回复并保存对话记录
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from bharatgpt.config.settings import settings
from bharatgpt.models.chat_interaction import ChatInteraction, MessageFeedback
from bharatgpt.models.user import User
from bharatgpt.repositories.chat_repository import ChatRepository, FeedbackRepository
from bharatgpt.utils.helpers import format_timestamp
from bharatgpt.utils.multilingual import parse_multilingual_response
from bharatgpt.utils.webhook_client import WebhookClient, WebhookError

logger = logging.getLogger(__name__)

DEFAULT_REPLY = "I'm here to help you learn! Could you please rephrase your question?"
FALLBACK_REPLY = (
    "I'm having trouble connecting right now, but I'm here to help you learn! "
    "What subject would you like to explore today?"
)
FEEDBACK_TYPES = ("helpful", "not_helpful")
USER_LEVEL = "beginner"

# 工作流回复文本可能出现的字段，按优先级排列
_REPLY_KEYS = ("response", "message", "output", "text")


def shape_webhook_reply(data: Any) -> Tuple[str, int]:
    """
    从工作流响应中取出回复文本和理解程度

    列表取第一个元素；文本依次尝试 response、message、output、text；
    理解程度取 understanding_level（1-5的整数），否则为默认值。
    """
    if isinstance(data, list):
        data = data[0] if data else {}
    if isinstance(data, str):
        return (data.strip() or DEFAULT_REPLY), settings.DEFAULT_UNDERSTANDING_LEVEL
    if not isinstance(data, dict):
        return DEFAULT_REPLY, settings.DEFAULT_UNDERSTANDING_LEVEL

    text = DEFAULT_REPLY
    for key in _REPLY_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            text = value
            break

    level = data.get("understanding_level")
    if isinstance(level, bool) or not isinstance(level, (int, float)) or not 1 <= level <= 5:
        level = settings.DEFAULT_UNDERSTANDING_LEVEL
    return text, int(level)


class ChatService:
    def __init__(self, db: Session, webhook_client: Optional[WebhookClient] = None):
        self.db = db
        self.webhook = webhook_client or WebhookClient()
        self.chat_repo = ChatRepository(db)
        self.feedback_repo = FeedbackRepository(db)
        logger.debug("聊天服务初始化完成")

    def build_context(self, user_id: int) -> List[Dict[str, Any]]:
        """最近的对话，展开成按时间排列的消息，最多 CHAT_CONTEXT_MESSAGES 条"""
        limit = settings.CHAT_CONTEXT_MESSAGES
        interactions = self.chat_repo.get_recent_interactions(user_id, limit)
        messages = []
        for interaction in interactions:
            timestamp = format_timestamp(interaction.created_at)
            messages.append({"text": interaction.user_message, "is_user": True, "timestamp": timestamp})
            messages.append({"text": interaction.ai_response, "is_user": False, "timestamp": timestamp})
        return messages[-limit:] if limit else []

    async def send_message(self, user: User, text: str, module_id: Optional[int] = None,
                           language: Optional[str] = None,
                           audio_enabled: bool = False) -> Dict[str, Any]:
        """
        发送聊天消息

        工作流失败时返回兜底回复，不保存对话记录。

        Raises:
            ValueError: 消息为空
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("message must not be empty")

        payload = {
            "message": text,
            "user_id": str(user.id),
            "module_id": module_id,
            "context": {
                "previous_messages": self.build_context(user.id),
                "user_level": USER_LEVEL,
                "language_preference": language or user.language_preference or "en",
            },
        }

        interaction: Optional[ChatInteraction] = None
        try:
            data = await self.webhook.post_json_async(settings.CHAT_WEBHOOK_URL, payload)
            reply, level = shape_webhook_reply(data)
            fallback = False
            interaction = self._save_interaction(user.id, module_id, text, reply, level)
        except WebhookError as e:
            logger.error(f"聊天工作流调用失败: {e}")
            reply, level, fallback = FALLBACK_REPLY, None, True

        response = {
            "interaction_id": interaction.id if interaction else None,
            "user_message": text,
            "response": reply,
            "understanding_level": level,
            "module_id": module_id,
            "fallback": fallback,
            "languages": parse_multilingual_response(reply),
            "timestamp": format_timestamp(),
        }
        if audio_enabled:
            # 聊天回复统一用美式英语朗读
            response["speech"] = {"text": reply, "lang": "en-US"}
        return response

    def _save_interaction(self, user_id: int, module_id: Optional[int], user_message: str,
                          ai_response: str, level: int) -> Optional[ChatInteraction]:
        try:
            return self.chat_repo.create(
                user_id=user_id,
                module_id=module_id,
                user_message=user_message,
                ai_response=ai_response,
                understanding_level=level,
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"保存对话记录失败: {e}")
            return None

    def provide_feedback(self, user_id: int, interaction_id: int, feedback_type: str) -> MessageFeedback:
        """
        对AI回复进行评价

        Raises:
            ValueError: 评价类型不合法，或对话不存在/不属于该用户
        """
        if feedback_type not in FEEDBACK_TYPES:
            raise ValueError(f"invalid feedback type: {feedback_type}")
        interaction = self.chat_repo.get_by_id(interaction_id)
        if not interaction or interaction.user_id != user_id:
            raise ValueError(f"chat interaction {interaction_id} not found")

        feedback = self.feedback_repo.create(
            user_id=user_id,
            interaction_id=interaction_id,
            feedback_type=feedback_type,
        )
        logger.info(f"收到对话评价: 用户{user_id}, 对话{interaction_id}, {feedback_type}")
        return feedback

    def get_history(self, user_id: int, skip: int = 0, limit: int = 50) -> List[ChatInteraction]:
        return self.chat_repo.get_user_history(user_id, skip, limit)
