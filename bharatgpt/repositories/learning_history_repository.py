from typing import List
from sqlalchemy.orm import Session

from bharatgpt.models.learning_history import LearningHistory
from bharatgpt.repositories.base import BaseRepository


class LearningHistoryRepository(BaseRepository[LearningHistory]):
    def __init__(self, db: Session):
        super().__init__(db, LearningHistory)
    
    def get_user_history(self, user_id: int, limit: int = 10) -> List[LearningHistory]:
        """获取用户学习历史，最新的在前"""
        return self.db.query(LearningHistory).filter(
            LearningHistory.user_id == user_id
        ).order_by(LearningHistory.timestamp.desc(), LearningHistory.id.desc()).limit(limit).all()
