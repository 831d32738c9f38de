import json
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from sqlalchemy.orm import Session

from bharatgpt.api.websocket_manager import websocket_manager
from bharatgpt.api.schemas.websocket_schemas import (
    UserMessage, SpeechStartMessage, SpeechResultMessage, SpeechErrorMessage,
    ChatResponseMessage, SpeechControlMessage, ErrorMessage,
)
from bharatgpt.models.user import User
from bharatgpt.services.auth_service import AuthService, AuthError
from bharatgpt.services.chat_service import ChatService
from bharatgpt.utils.helpers import format_timestamp
from bharatgpt.utils.speech_recognition import RecognitionAction, RecognitionEvent, RecognitionSession

logger = logging.getLogger(__name__)


class ChatWebSocketHandler:
    """
    聊天WebSocket处理器

    每个连接持有一个语音识别会话；文字消息和最终识别结果都交给聊天服务处理。
    """

    def __init__(self, db: Session):
        self.db = db
        self.chat_service = ChatService(db)

    def authenticate(self, token: str, user_id: int) -> Optional[User]:
        """令牌有效且属于路径中的用户才允许连接"""
        if not token:
            return None
        try:
            user = AuthService(self.db).get_user_from_token(token)
        except AuthError as e:
            logger.warning(f"WebSocket认证失败: {e}")
            return None
        return user if user.id == user_id else None

    async def handle_connection(self, websocket: WebSocket, user_id: int, token: str):
        logger.info(f"用户 {user_id} 尝试连接WebSocket")

        user = self.authenticate(token, user_id)
        if not user:
            await websocket.close(code=1008, reason="认证失败")
            return

        await websocket.accept()
        connection_id = f"{user_id}-{uuid.uuid4().hex[:8]}"
        await websocket_manager.connect(websocket, connection_id, user_id)
        recognition = RecognitionSession()

        try:
            await websocket_manager.send_message(connection_id, {
                "type": "session_start",
                "connection_id": connection_id,
                "user_id": user_id,
                "message": "Connected to BharatGPT tutor",
                "speech_languages": recognition.available_languages(),
                "timestamp": format_timestamp(),
            })
            await self._message_loop(websocket, connection_id, user, recognition)
            await websocket.close(code=1000)
        except WebSocketDisconnect:
            logger.info(f"用户 {user_id} WebSocket连接正常断开")
        finally:
            websocket_manager.disconnect(connection_id)

    async def _message_loop(self, websocket: WebSocket, connection_id: str, user: User,
                            recognition: RecognitionSession):
        while True:
            data = await websocket.receive_text()
            message = self._parse_message(data)
            if not message:
                continue

            message_type = message["type"]
            if message_type == "session_end":
                logger.info(f"用户 {user.id} 主动结束会话")
                recognition.stop()
                break

            try:
                response = await self._dispatch(message_type, message, user, recognition)
            except ValidationError as e:
                logger.warning(f"消息格式错误: {message_type}, {e.errors()}")
                response = self._error(f"Invalid {message_type} message")

            if response:
                await websocket_manager.send_message(connection_id, response)

    async def _dispatch(self, message_type: str, message: Dict[str, Any], user: User,
                        recognition: RecognitionSession) -> Optional[Dict[str, Any]]:
        if message_type == "user_message":
            msg = UserMessage.model_validate(message)
            return await self._chat(user, msg.content, msg.module_id, msg.language, msg.audio_enabled)

        if message_type == "heartbeat":
            return {"type": "heartbeat_ack", "timestamp": format_timestamp()}

        if message_type == "speech_start":
            msg = SpeechStartMessage.model_validate(message)
            recognition.supported = bool(message.get("supported", True))
            try:
                event = recognition.start(msg.language)
            except ValueError as e:
                return self._error(str(e))
            if event is None:
                return self._error("Speech recognition is not supported on this client")
            return self._control(event)

        if message_type == "speech_result":
            msg = SpeechResultMessage.model_validate(message)
            transcript = recognition.handle_result(
                [r.model_dump() for r in msg.results], msg.result_index
            )
            if not transcript:
                return None
            return await self._chat(user, transcript, msg.module_id, recognition.language, False)

        if message_type == "speech_error":
            msg = SpeechErrorMessage.model_validate(message)
            event = recognition.handle_error(msg.error)
            if event.action == RecognitionAction.NONE:
                return None
            return self._control(event)

        if message_type == "speech_end":
            return self._control(recognition.handle_end())

        return self._error(f"Unknown message type: {message_type}")

    async def _chat(self, user: User, text: str, module_id: Optional[int], language: Optional[str],
                    audio_enabled: bool) -> Dict[str, Any]:
        try:
            result = await self.chat_service.send_message(user, text, module_id, language, audio_enabled)
        except ValueError as e:
            return self._error(str(e))
        return ChatResponseMessage(data=result, timestamp=format_timestamp()).model_dump()

    @staticmethod
    def _control(event: RecognitionEvent) -> Dict[str, Any]:
        payload = event.to_dict()
        return SpeechControlMessage(
            action=payload["action"],
            delay_ms=payload["delay_ms"],
            error=payload["error"],
            config=payload["config"],
            timestamp=format_timestamp(),
        ).model_dump()

    @staticmethod
    def _error(text: str) -> Dict[str, Any]:
        return ErrorMessage(message=text, timestamp=format_timestamp()).model_dump()

    @staticmethod
    def _parse_message(data: str) -> Optional[Dict[str, Any]]:
        """解析JSON消息，格式错误或缺少type时返回None"""
        try:
            message = json.loads(data)
        except json.JSONDecodeError:
            logger.error(f"消息JSON解析失败: {data}")
            return None
        if not isinstance(message, dict) or "type" not in message:
            logger.error("消息缺少type字段")
            return None
        return message
