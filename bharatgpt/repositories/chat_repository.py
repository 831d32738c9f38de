from typing import List
from sqlalchemy.orm import Session
from bharatgpt.models.chat_interaction import ChatInteraction, MessageFeedback
from bharatgpt.repositories.base import BaseRepository


class ChatRepository(BaseRepository[ChatInteraction]):
    def __init__(self, db: Session):
        super().__init__(db, ChatInteraction)

    def get_recent_interactions(self, user_id: int, limit: int = 5) -> List[ChatInteraction]:
        """获取最近的对话，按时间正序返回"""
        rows = self.db.query(ChatInteraction).filter(
            ChatInteraction.user_id == user_id
        ).order_by(ChatInteraction.id.desc()).limit(limit).all()
        return list(reversed(rows))

    def get_user_history(self, user_id: int, skip: int = 0, limit: int = 50) -> List[ChatInteraction]:
        return self.db.query(ChatInteraction).filter(
            ChatInteraction.user_id == user_id
        ).order_by(ChatInteraction.id.desc()).offset(skip).limit(limit).all()


class FeedbackRepository(BaseRepository[MessageFeedback]):
    def __init__(self, db: Session):
        super().__init__(db, MessageFeedback)
