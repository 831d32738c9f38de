from typing import Optional, List
from sqlalchemy.orm import Session, joinedload
from bharatgpt.models.user_progress import UserProgress
from bharatgpt.repositories.base import BaseRepository


class ProgressRepository(BaseRepository[UserProgress]):
    def __init__(self, db: Session):
        super().__init__(db, UserProgress)

    def get_user_progress(self, user_id: int) -> List[UserProgress]:
        """获取用户全部进度，最近访问的在前"""
        return self.db.query(UserProgress).filter(
            UserProgress.user_id == user_id
        ).order_by(UserProgress.last_accessed.desc()).all()

    def get_for_module(self, user_id: int, module_id: int) -> Optional[UserProgress]:
        return self.db.query(UserProgress).filter(
            UserProgress.user_id == user_id,
            UserProgress.module_id == module_id
        ).first()

    def get_all_with_relations(self) -> List[UserProgress]:
        """导出用：预加载用户和模块"""
        return self.db.query(UserProgress).options(
            joinedload(UserProgress.user),
            joinedload(UserProgress.module)
        ).order_by(UserProgress.id).all()
