from typing import Optional, List
from sqlalchemy.orm import Session
from bharatgpt.models.learning_module import LearningModule
from bharatgpt.repositories.base import BaseRepository

class ModuleRepository(BaseRepository[LearningModule]):
    def __init__(self, db: Session):
        super().__init__(db, LearningModule)

    def get_by_title(self, title: str) -> Optional[LearningModule]:
        """根据标题获取模块"""
        return self.db.query(LearningModule).filter(LearningModule.title == title).first()
    
    def get_active_modules(self) -> List[LearningModule]:
        """获取所有启用的模块，按 order_index 排序"""
        return self.db.query(LearningModule).filter(
            LearningModule.is_active == True
        ).order_by(LearningModule.order_index).all()

    def get_all_ordered(self) -> List[LearningModule]:
        return self.db.query(LearningModule).order_by(LearningModule.order_index).all()
