from sqlalchemy import Column, String, Integer, Text, Boolean
from .base import BaseModel

"""
学习模块模型  
记录一个学习单元的标题、学科、难度、正文、音视频链接以及排序。
"""
class LearningModule(BaseModel):
    __tablename__ = "learning_modules"

    title = Column(String(200), nullable=False)
    description = Column(Text)
    subject = Column(String(100))
    difficulty_level = Column(String(20), default="beginner")  # beginner, intermediate, advanced
    content = Column(Text, default="")
    video_url = Column(String(500))
    audio_url = Column(String(500))
    order_index = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "difficulty_level": self.difficulty_level,
            "content": self.content,
            "video_url": self.video_url,
            "audio_url": self.audio_url,
            "order_index": self.order_index,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
