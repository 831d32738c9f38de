from sqlalchemy import Column, String, Integer, ForeignKey, Text, Boolean, JSON
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
测验模型  
questions 为JSON列表，每项包含 id、question、type(mcq/fill_blank/coding/true_false/short_answer)、
options、correct_answer、explanation、points。
"""
class Quiz(BaseModel):
    __tablename__ = "quizzes"

    module_id = Column(Integer, ForeignKey("learning_modules.id"))
    title = Column(String(200), nullable=False)
    description = Column(Text)
    topic = Column(String(100))
    questions = Column(JSON, nullable=False, default=list)
    passing_score = Column(Integer, default=60)
    time_limit_minutes = Column(Integer, default=30)
    max_attempts = Column(Integer, default=3)
    is_active = Column(Boolean, default=True)

    module = relationship("LearningModule", backref="quizzes")

    def to_dict(self):
        return {
            "id": self.id,
            "module_id": self.module_id,
            "title": self.title,
            "description": self.description,
            "topic": self.topic,
            "questions": self.questions,
            "passing_score": self.passing_score,
            "time_limit_minutes": self.time_limit_minutes,
            "max_attempts": self.max_attempts,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
