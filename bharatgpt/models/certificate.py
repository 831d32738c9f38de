from sqlalchemy import Column, String, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
证书模型  
测验通过后签发，记录成绩等级、得分和证书文件路径。
"""
class Certificate(BaseModel):
    __tablename__ = "certificates"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("learning_modules.id"))
    quiz_id = Column(Integer, ForeignKey("quizzes.id"))
    attempt_id = Column(Integer, ForeignKey("quiz_attempts.id"))
    grade = Column(String(2))
    score = Column(Integer)
    issued_date = Column(DateTime(timezone=True))
    certificate_url = Column(String(500))

    user = relationship("User", backref="certificates")
    module = relationship("LearningModule")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "module_id": self.module_id,
            "quiz_id": self.quiz_id,
            "attempt_id": self.attempt_id,
            "grade": self.grade,
            "score": self.score,
            "issued_date": self.issued_date.isoformat() if self.issued_date else None,
            "certificate_url": self.certificate_url
        }
