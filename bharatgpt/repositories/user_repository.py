from datetime import datetime
from typing import Optional, List
from sqlalchemy.orm import Session
from bharatgpt.models.user import User
from bharatgpt.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)
    
    def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户"""
        return self.db.query(User).filter(User.email == email).first()
    
    def get_users_signed_in_since(self, since: datetime) -> List[User]:
        """获取指定时间之后登录过的用户"""
        return self.db.query(User).filter(User.last_sign_in_at >= since).all()

    def list_users(self, limit: Optional[int] = None) -> List[User]:
        """按创建时间倒序列出用户，limit为None时不限制"""
        query = self.db.query(User).order_by(User.created_at.desc(), User.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()
