#!/usr/bin/env python3
"""
题库测验服务
负责测验查询、按分值计分、评级、保存作答记录和签发证书
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from bharatgpt.models.quiz import Quiz
from bharatgpt.models.quiz_attempt import QuizAttempt
from bharatgpt.models.certificate import Certificate
from bharatgpt.repositories.quiz_repository import (
    QuizRepository, QuizAttemptRepository, CertificateRepository
)
from bharatgpt.services.user_service import UserService
from bharatgpt.utils.helpers import percent, round_half_up, utcnow

logger = logging.getLogger(__name__)

# (最低百分比, 等级)，从高到低匹配
GRADE_THRESHOLDS = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]


def grade_for(percentage: int) -> str:
    """百分比换算等级"""
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return "F"


def calculate_score(questions: List[Dict[str, Any]], answers: Dict[str, str]) -> Dict[str, Any]:
    """
    按分值计分

    答案按题目id对应，与正确答案完全相同才得分。

    Returns:
        dict: score(得分), total_points, percentage, grade, correct_count, graded_questions
    """
    total_points = 0
    earned_points = 0
    correct_count = 0
    graded_questions = []

    for question in questions:
        points = question.get("points", 1)
        total_points += points
        user_answer = answers.get(str(question.get("id")))
        is_correct = user_answer is not None and user_answer == question.get("correct_answer")
        if is_correct:
            earned_points += points
            correct_count += 1
        graded_questions.append({
            "question": question.get("question"),
            "type": question.get("type"),
            "user_answer": user_answer or "",
            "correct_answer": question.get("correct_answer"),
            "is_correct": is_correct,
            "explanation": question.get("explanation", ""),
        })

    percentage = percent(earned_points, total_points)
    return {
        "score": earned_points,
        "total_points": total_points,
        "percentage": percentage,
        "grade": grade_for(percentage),
        "correct_count": correct_count,
        "graded_questions": graded_questions,
    }


def public_quiz_view(quiz: Quiz) -> Dict[str, Any]:
    """学生可见的测验内容，去掉正确答案和解析"""
    data = quiz.to_dict()
    data["questions"] = [
        {k: v for k, v in question.items() if k not in ("correct_answer", "explanation")}
        for question in (quiz.questions or [])
    ]
    return data


class QuizService:
    def __init__(self, db: Session):
        self.db = db
        self.quiz_repo = QuizRepository(db)
        self.attempt_repo = QuizAttemptRepository(db)
        self.certificate_repo = CertificateRepository(db)
        self.user_service = UserService(db)
        logger.debug("测验服务初始化完成")

    def get_active_quizzes(self) -> List[Quiz]:
        return self.quiz_repo.get_active_quizzes()

    def get_quiz(self, quiz_id: int) -> Optional[Quiz]:
        quiz = self.quiz_repo.get_by_id(quiz_id)
        if quiz and not quiz.is_active:
            return None
        return quiz

    def submit_attempt(self, user_id: int, quiz_id: int, answers: Dict[str, str],
                       time_taken_seconds: Optional[int] = None) -> Dict[str, Any]:
        """
        提交题库测验

        Returns:
            dict: attempt(作答记录) 和 certificate(通过时签发的证书，否则为None)

        Raises:
            ValueError: 测验不存在或作答次数已用完
        """
        quiz = self.get_quiz(quiz_id)
        if not quiz:
            raise ValueError(f"quiz {quiz_id} not found")

        last_attempt_number = self.attempt_repo.get_last_attempt_number(user_id, quiz.id)
        if quiz.max_attempts and last_attempt_number >= quiz.max_attempts:
            raise ValueError(f"maximum attempts ({quiz.max_attempts}) reached for this quiz")

        result = calculate_score(quiz.questions or [], answers or {})
        passed = result["percentage"] >= quiz.passing_score

        time_limit_seconds = (quiz.time_limit_minutes or 0) * 60
        elapsed = time_taken_seconds if time_taken_seconds is not None else time_limit_seconds
        if time_limit_seconds:
            elapsed = min(max(elapsed, 0), time_limit_seconds)
        completed_at = utcnow()

        attempt = self.attempt_repo.create(
            user_id=user_id,
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            quiz_topic=quiz.topic,
            answers=answers or {},
            score=result["score"],
            percentage=result["percentage"],
            grade=result["grade"],
            total_questions=len(quiz.questions or []),
            correct_count=result["correct_count"],
            time_taken_minutes=round_half_up(elapsed / 60),
            attempt_number=last_attempt_number + 1,
            passed=passed,
            graded_questions=result["graded_questions"],
            started_at=completed_at - timedelta(seconds=elapsed),
            completed_at=completed_at,
        )
        logger.info(
            f"测验提交: 用户{user_id}, 测验{quiz.id}, 第{attempt.attempt_number}次, "
            f"得分{attempt.percentage}%, 等级{attempt.grade}, 通过{passed}"
        )

        certificate = self._issue_certificate(user_id, quiz, attempt) if passed else None

        self.user_service.record_learning_history(
            user_id=user_id,
            module_id=quiz.module_id,
            topic=quiz.topic or quiz.title,
            activity_type="quiz_completed",
            details={
                "quiz_id": quiz.id,
                "quiz_title": quiz.title,
                "percentage": attempt.percentage,
                "passed": passed,
            },
        )

        return {"attempt": attempt, "certificate": certificate}

    def _issue_certificate(self, user_id: int, quiz: Quiz, attempt: QuizAttempt) -> Optional[Certificate]:
        """通过测验后签发证书，失败不影响作答结果"""
        try:
            certificate = self.certificate_repo.create(
                user_id=user_id,
                module_id=quiz.module_id,
                quiz_id=quiz.id,
                attempt_id=attempt.id,
                grade=attempt.grade,
                score=attempt.percentage,
                issued_date=utcnow(),
                certificate_url=f"certificates/{user_id}/{quiz.id}/{attempt.id}.pdf",
            )
            logger.info(f"证书已签发: 用户{user_id}, 测验{quiz.id}")
            return certificate
        except Exception as e:
            self.db.rollback()
            logger.error(f"签发证书失败: {e}")
            return None

    def get_quiz_history(self, user_id: int, limit: int = 10) -> List[QuizAttempt]:
        return self.attempt_repo.get_recent_attempts(user_id, limit)

    def get_certificates(self, user_id: int) -> List[Certificate]:
        return self.certificate_repo.get_user_certificates(user_id)
