from sqlalchemy import Column, String, Integer, ForeignKey, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
学习进度模型  
每个用户在每个模块上的一条进度记录: 状态、完成百分比、学习时长、AI反馈、理解程度(1-5)、重试次数。
"""
class UserProgress(BaseModel):
    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_user_module"),)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("learning_modules.id"), nullable=False)
    status = Column(String(20), default="not_started")  # not_started, in_progress, completed
    completion_percentage = Column(Integer, default=0)
    time_spent_minutes = Column(Integer, default=0)
    ai_feedback = Column(Text)
    understanding_level = Column(Integer, default=1)
    retry_count = Column(Integer, default=0)
    last_accessed = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))

    user = relationship("User", backref="progress_items")
    module = relationship("LearningModule")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "module_id": self.module_id,
            "status": self.status,
            "completion_percentage": self.completion_percentage,
            "time_spent_minutes": self.time_spent_minutes,
            "ai_feedback": self.ai_feedback,
            "understanding_level": self.understanding_level,
            "retry_count": self.retry_count,
            "last_accessed": self.last_accessed.isoformat() if self.last_accessed else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None
        }
