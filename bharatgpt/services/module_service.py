import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from bharatgpt.models.learning_module import LearningModule
from bharatgpt.repositories.module_repository import ModuleRepository

logger = logging.getLogger(__name__)

DIFFICULTY_LEVELS = ("beginner", "intermediate", "advanced")


class ModuleService:
    """学习模块服务，负责模块内容的管理和获取"""

    def __init__(self, db: Session):
        self.db = db
        self.module_repo = ModuleRepository(db)

    def get_active_modules(self) -> List[LearningModule]:
        """获取所有启用的模块"""
        return self.module_repo.get_active_modules()

    def get_module_by_id(self, module_id: int) -> Optional[LearningModule]:
        """根据ID获取模块"""
        return self.module_repo.get_by_id(module_id)

    def create_module(self, **fields) -> LearningModule:
        """创建新模块"""
        level = fields.get("difficulty_level", "beginner")
        if level not in DIFFICULTY_LEVELS:
            raise ValueError(f"invalid difficulty level: {level}")
        if self.module_repo.get_by_title(fields["title"]):
            raise ValueError(f"module '{fields['title']}' already exists")
        module = self.module_repo.create(**fields)
        logger.info(f"创建学习模块: {module.id} - {module.title}")
        return module

    def update_module(self, module_id: int, **fields) -> Optional[LearningModule]:
        """更新模块"""
        level = fields.get("difficulty_level")
        if level is not None and level not in DIFFICULTY_LEVELS:
            raise ValueError(f"invalid difficulty level: {level}")
        return self.module_repo.update(module_id, **fields)

    def deactivate_module(self, module_id: int) -> bool:
        """停用模块（软删除）"""
        return self.module_repo.update(module_id, is_active=False) is not None
