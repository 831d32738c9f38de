from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, JSON
from .base import BaseModel

"""
学习历史模型  
记录用户的学习活动(生成测验、完成测验等)，details 为任意JSON。
"""
class LearningHistory(BaseModel):
    __tablename__ = "learning_history"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("learning_modules.id"))
    topic = Column(String(200), nullable=False)
    activity_type = Column(String(50), nullable=False)  # quiz_generated, quiz_completed
    details = Column(JSON)
    timestamp = Column(DateTime(timezone=True))

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "module_id": self.module_id,
            "topic": self.topic,
            "activity_type": self.activity_type,
            "details": self.details,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None
        }
