#!/usr/bin/env python3
"""
认证服务模块
处理注册、登录、JWT签发与校验
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

import jwt
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from bharatgpt.config.settings import settings
from bharatgpt.models.user import User
from bharatgpt.repositories.user_repository import UserRepository
from bharatgpt.utils.helpers import utcnow

logger = logging.getLogger(__name__)

VALID_ROLES = ("student", "admin")


class AuthError(Exception):
    """令牌缺失、无效或过期"""


def create_token(user_id: int, role: str) -> str:
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": utcnow() + timedelta(hours=settings.JWT_EXPIRY_HOURS),
        "iat": utcnow(),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    @staticmethod
    def normalize_email(email: str) -> str:
        return (email or "").strip().lower()

    def register(self, email: str, password: str, full_name: str = "",
                 role: str = "student", language_preference: str = "en") -> Tuple[User, str]:
        """
        注册新用户

        Returns:
            (User, token)

        Raises:
            ValueError: 参数不合法或邮箱已注册
        """
        email = self.normalize_email(email)
        if not email or not password:
            raise ValueError("email and password are required")
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        if role not in VALID_ROLES:
            raise ValueError(f"invalid role: {role}")
        if self.user_repo.get_by_email(email):
            raise ValueError("email already registered")
        if email in (self.normalize_email(e) for e in settings.ADMIN_EMAILS):
            role = "admin"

        user = self.user_repo.create(
            email=email,
            password_hash=generate_password_hash(password),
            full_name=(full_name or "").strip(),
            role=role,
            language_preference=language_preference or "en",
            is_active=True,
            last_sign_in_at=utcnow(),
        )
        logger.info(f"新用户注册成功: {user.id} ({user.role})")
        return user, create_token(user.id, user.role)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        邮箱密码登录

        Raises:
            ValueError: 凭证错误
            PermissionError: 账号已停用
        """
        email = self.normalize_email(email)
        user = self.user_repo.get_by_email(email)
        if not user or not check_password_hash(user.password_hash, password or ""):
            logger.warning(f"登录失败: {email}")
            raise ValueError("invalid credentials")
        if not user.is_active:
            raise PermissionError("account is disabled")

        user = self.user_repo.update(user.id, last_sign_in_at=utcnow())
        logger.info(f"用户登录成功: {user.id}")
        return user, create_token(user.id, user.role)

    def set_role(self, user_id: int, role: str) -> Optional[User]:
        """
        修改用户角色，用户不存在返回None

        Raises:
            ValueError: 角色不合法
        """
        if role not in VALID_ROLES:
            raise ValueError(f"invalid role: {role}")
        user = self.user_repo.update(user_id, role=role)
        if user:
            logger.info(f"用户 {user_id} 角色变更为 {role}")
        return user

    def get_user_from_token(self, token: str) -> User:
        """
        根据令牌取得当前用户

        Raises:
            AuthError: 令牌无效，或用户不存在/已停用
        """
        payload = decode_token(token)
        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise AuthError("Invalid token")

        user: Optional[User] = self.user_repo.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthError("User not found or inactive")
        return user
