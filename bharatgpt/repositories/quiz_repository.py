from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from bharatgpt.models.quiz import Quiz
from bharatgpt.models.quiz_attempt import QuizAttempt
from bharatgpt.models.certificate import Certificate
from bharatgpt.repositories.base import BaseRepository


class QuizRepository(BaseRepository[Quiz]):
    def __init__(self, db: Session):
        super().__init__(db, Quiz)

    def get_active_quizzes(self) -> List[Quiz]:
        """获取所有启用的测验"""
        return self.db.query(Quiz).filter(Quiz.is_active == True).order_by(Quiz.id).all()

    def get_by_title(self, title: str) -> Optional[Quiz]:
        return self.db.query(Quiz).filter(Quiz.title == title).first()


class QuizAttemptRepository(BaseRepository[QuizAttempt]):
    def __init__(self, db: Session):
        super().__init__(db, QuizAttempt)

    def get_recent_attempts(self, user_id: int, limit: int = 10) -> List[QuizAttempt]:
        """获取用户最近的作答记录"""
        return self.db.query(QuizAttempt).filter(
            QuizAttempt.user_id == user_id
        ).order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc()).limit(limit).all()

    def get_latest_attempts(self, limit: int = 10) -> List[QuizAttempt]:
        """所有用户的最近作答，预加载用户和测验"""
        return self.db.query(QuizAttempt).options(
            joinedload(QuizAttempt.user),
            joinedload(QuizAttempt.quiz)
        ).order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc()).limit(limit).all()

    def get_last_attempt_number(self, user_id: int, quiz_id: int) -> int:
        """用户在某测验上的最大作答序号，没有作答时返回0"""
        result = self.db.query(func.max(QuizAttempt.attempt_number)).filter(
            QuizAttempt.user_id == user_id,
            QuizAttempt.quiz_id == quiz_id
        ).scalar()
        return result or 0


class CertificateRepository(BaseRepository[Certificate]):
    def __init__(self, db: Session):
        super().__init__(db, Certificate)

    def get_user_certificates(self, user_id: int) -> List[Certificate]:
        return self.db.query(Certificate).filter(
            Certificate.user_id == user_id
        ).order_by(Certificate.issued_date.desc()).all()

    def get_all_with_relations(self) -> List[Certificate]:
        """导出用：预加载用户和模块"""
        return self.db.query(Certificate).options(
            joinedload(Certificate.user),
            joinedload(Certificate.module)
        ).order_by(Certificate.id).all()
