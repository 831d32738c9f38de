from sqlalchemy import Column, String, Integer, ForeignKey, Text, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
测验作答模型  
存储题库测验和生成测验两种作答结果。生成测验没有 quiz_id，标题和主题直接保存在记录里。
"""
class QuizAttempt(BaseModel):
    __tablename__ = "quiz_attempts"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"))
    quiz_title = Column(String(200))
    quiz_topic = Column(String(100))
    answers = Column(JSON, default=dict)
    score = Column(Integer, default=0)
    percentage = Column(Integer, default=0)
    grade = Column(String(2), default="F")  # A, B, C, D, F
    total_questions = Column(Integer, default=0)
    correct_count = Column(Integer, default=0)
    time_taken_minutes = Column(Integer, default=0)
    attempt_number = Column(Integer, default=1)
    passed = Column(Boolean, default=False)
    feedback = Column(Text)
    graded_questions = Column(JSON, default=list)
    started_at = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))

    user = relationship("User", backref="quiz_attempts")
    quiz = relationship("Quiz", backref="attempts")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "quiz_id": self.quiz_id,
            "quiz_title": self.quiz_title,
            "quiz_topic": self.quiz_topic,
            "answers": self.answers,
            "score": self.score,
            "percentage": self.percentage,
            "grade": self.grade,
            "total_questions": self.total_questions,
            "correct_count": self.correct_count,
            "time_taken_minutes": self.time_taken_minutes,
            "attempt_number": self.attempt_number,
            "passed": self.passed,
            "feedback": self.feedback,
            "graded_questions": self.graded_questions,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None
        }
