from sqlalchemy import Column, String, Boolean, DateTime
from .base import BaseModel

"""
用户模型  
记录用户信息,包括邮箱、密码哈希、姓名、角色(学生/管理员)、语言偏好、最近登录时间等。
"""
class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), default="")
    role = Column(String(20), default="student", nullable=False)  # student, admin
    language_preference = Column(String(10), default="en")
    is_active = Column(Boolean, default=True)
    last_sign_in_at = Column(DateTime(timezone=True))

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self):
        # 不导出密码哈希
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
            "language_preference": self.language_preference,
            "is_active": self.is_active,
            "last_sign_in_at": self.last_sign_in_at.isoformat() if self.last_sign_in_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
