from sqlalchemy import Column, String, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
聊天记录模型  
保存一次问答: 用户消息、AI回复、当前模块和理解程度；以及用户对回复的评价。
"""
class ChatInteraction(BaseModel):
    __tablename__ = "chat_interactions"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("learning_modules.id"))
    user_message = Column(Text, nullable=False)
    ai_response = Column(Text, nullable=False)
    understanding_level = Column(Integer, default=3)

    user = relationship("User", backref="chat_interactions")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "module_id": self.module_id,
            "user_message": self.user_message,
            "ai_response": self.ai_response,
            "understanding_level": self.understanding_level,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }


class MessageFeedback(BaseModel):
    __tablename__ = "message_feedback"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    interaction_id = Column(Integer, ForeignKey("chat_interactions.id"), nullable=False)
    feedback_type = Column(String(20), nullable=False)  # helpful, not_helpful

    interaction = relationship("ChatInteraction", backref="feedback")
