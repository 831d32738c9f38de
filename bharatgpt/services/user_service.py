#!/usr/bin/env python3
"""
用户服务模块
处理用户资料、学习进度和学习历史
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from bharatgpt.models.user import User
from bharatgpt.models.user_progress import UserProgress
from bharatgpt.models.learning_history import LearningHistory
from bharatgpt.repositories.user_repository import UserRepository
from bharatgpt.repositories.module_repository import ModuleRepository
from bharatgpt.repositories.progress_repository import ProgressRepository
from bharatgpt.repositories.learning_history_repository import LearningHistoryRepository
from bharatgpt.utils.helpers import utcnow, clamp

logger = logging.getLogger(__name__)

PROGRESS_STATUSES = ("not_started", "in_progress", "completed")


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.module_repo = ModuleRepository(db)
        self.progress_repo = ProgressRepository(db)
        self.history_repo = LearningHistoryRepository(db)
        logger.debug("用户服务初始化完成")

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """根据ID获取用户信息"""
        return self.user_repo.get_by_id(user_id)

    def update_profile(self, user_id: int, profile: Dict[str, Any]) -> Optional[User]:
        """更新姓名和语言偏好"""
        update_data = {}
        if profile.get("full_name") is not None:
            update_data["full_name"] = profile["full_name"].strip()
        if profile.get("language_preference"):
            update_data["language_preference"] = profile["language_preference"]

        if update_data:
            user = self.user_repo.update(user_id, **update_data)
            logger.info(f"用户资料更新成功: {user_id}")
            return user
        return self.user_repo.get_by_id(user_id)

    def get_progress(self, user_id: int) -> List[UserProgress]:
        return self.progress_repo.get_user_progress(user_id)

    def update_progress(self, user_id: int, module_id: int, **fields) -> UserProgress:
        """
        新建或更新 (用户, 模块) 的进度记录

        status=completed 时完成度置为100并记录完成时间；理解程度限制在1-5。

        Raises:
            ValueError: 模块不存在或状态不合法
        """
        if not self.module_repo.get_by_id(module_id):
            raise ValueError(f"learning module {module_id} not found")

        status = fields.get("status")
        if status is not None and status not in PROGRESS_STATUSES:
            raise ValueError(f"invalid progress status: {status}")

        update_data = {k: v for k, v in fields.items() if v is not None}
        if "understanding_level" in update_data:
            update_data["understanding_level"] = clamp(update_data["understanding_level"], 1, 5)
        if "completion_percentage" in update_data:
            update_data["completion_percentage"] = clamp(update_data["completion_percentage"], 0, 100)

        now = utcnow()
        update_data["last_accessed"] = now
        if status == "completed":
            update_data["completion_percentage"] = 100
            update_data["completed_at"] = now

        progress = self.progress_repo.get_for_module(user_id, module_id)
        if progress:
            progress = self.progress_repo.update(progress.id, **update_data)
        else:
            update_data.setdefault("status", "in_progress")
            progress = self.progress_repo.create(user_id=user_id, module_id=module_id, **update_data)

        logger.info(f"学习进度已更新: 用户{user_id}, 模块{module_id}, 状态{progress.status}")
        return progress

    def record_learning_history(self, user_id: int, topic: str, activity_type: str,
                                details: Dict[str, Any] = None,
                                module_id: Optional[int] = None) -> Optional[LearningHistory]:
        """记录学习历史，失败时只记录日志"""
        try:
            return self.history_repo.create(
                user_id=user_id,
                module_id=module_id,
                topic=topic,
                activity_type=activity_type,
                details=details or {},
                timestamp=utcnow(),
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"保存学习历史失败: {e}")
            return None

    def get_learning_history(self, user_id: int, limit: int = 10) -> List[LearningHistory]:
        return self.history_repo.get_user_history(user_id, limit)
