import logging
import json
from typing import Dict
from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketManager:
    """WebSocket连接管理器"""

    def __init__(self):
        # 活跃连接: connection_id -> WebSocket
        self.active_connections: Dict[str, WebSocket] = {}
        # connection_id -> user_id
        self.connection_users: Dict[str, int] = {}
        logger.info("WebSocket管理器初始化完成")

    async def connect(self, websocket: WebSocket, connection_id: str, user_id: int):
        """
        保存已 accept 的连接

        Args:
            websocket: WebSocket连接
            connection_id: 连接ID
            user_id: 用户ID
        """
        self.active_connections[connection_id] = websocket
        self.connection_users[connection_id] = user_id
        logger.info(f"WebSocket连接已建立: 用户{user_id}, 连接{connection_id}")

    def disconnect(self, connection_id: str):
        if connection_id in self.active_connections:
            del self.active_connections[connection_id]
            user_id = self.connection_users.pop(connection_id, None)
            logger.info(f"WebSocket连接已断开: 用户{user_id}, 连接{connection_id}")

    async def send_message(self, connection_id: str, message: Dict):
        """
        向指定连接发送消息，发送失败时移除该连接
        """
        websocket = self.active_connections.get(connection_id)
        if websocket:
            try:
                await websocket.send_text(json.dumps(message, ensure_ascii=False))
                logger.debug(f"消息已发送到连接{connection_id}: {message.get('type', 'unknown')}")
            except Exception as e:
                logger.error(f"发送消息到连接{connection_id}失败: {e}")
                self.disconnect(connection_id)
        else:
            logger.warning(f"尝试向不存在的连接发送消息: {connection_id}")

    def get_connection_count(self) -> int:
        return len(self.active_connections)


# 全局WebSocket管理器实例
websocket_manager = WebSocketManager()
