#!/usr/bin/env python3
"""
测验生成与评分服务
优先调用 n8n 工作流生成/评分，工作流不可用时从本地题库挑选测验并在本地评分
"""

import copy
import logging
import random
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from bharatgpt.config.settings import settings
from bharatgpt.content.sample_quizzes import SAMPLE_QUIZZES
from bharatgpt.repositories.quiz_repository import QuizAttemptRepository
from bharatgpt.services.quiz_service import grade_for
from bharatgpt.services.user_service import UserService
from bharatgpt.utils.helpers import percent, round_half_up, utcnow
from bharatgpt.utils.webhook_client import WebhookClient, WebhookError

logger = logging.getLogger(__name__)

PASS_FEEDBACK = "Great job! You've demonstrated good understanding of the material."
FAIL_FEEDBACK = "Keep practicing! Review the material and try again."

_RESULT_KEYS = ("total_questions", "correct_count", "score_percent", "passed", "graded_questions")


def grade_locally(quiz: Dict[str, Any], answers: Dict[int, str],
                  passing_score: Optional[int] = None) -> Dict[str, Any]:
    """
    本地评分

    答案按题目下标对应，去除首尾空白并忽略大小写后与正确答案比较，未作答视为空字符串。
    """
    passing_score = settings.LOCAL_PASSING_SCORE if passing_score is None else passing_score
    questions = quiz.get("questions") or []

    graded_questions = []
    for index, question in enumerate(questions):
        user_answer = answers.get(index, "")
        correct_answer = str(question.get("correct_answer", ""))
        is_correct = user_answer.strip().lower() == correct_answer.lower()
        graded_questions.append({
            "question": question.get("question"),
            "type": question.get("type"),
            "user_answer": user_answer,
            "correct_answer": correct_answer,
            "is_correct": is_correct,
        })

    correct_count = sum(1 for q in graded_questions if q["is_correct"])
    score_percent = percent(correct_count, len(questions))
    passed = score_percent >= passing_score

    return {
        "quiz_topic": quiz.get("topic"),
        "quiz_title": quiz.get("title"),
        "total_questions": len(questions),
        "correct_count": correct_count,
        "score_percent": score_percent,
        "passed": passed,
        "feedback": PASS_FEEDBACK if passed else FAIL_FEEDBACK,
        "graded_questions": graded_questions,
    }


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _normalize_question(question: Dict[str, Any]) -> Dict[str, Any]:
    """题目字段统一为字符串，options 不是列表时丢弃"""
    options = question.get("options")
    normalized = dict(question)
    normalized["type"] = str(question.get("type") or "mcq")
    normalized["correct_answer"] = str(question["correct_answer"])
    normalized["options"] = [str(o) for o in options] if isinstance(options, list) else None
    return normalized


def _extract_generated_quiz(data: Any) -> Optional[Dict[str, Any]]:
    """从工作流响应中取出测验，支持 {quiz: {...}}、[{quiz: {...}}] 和直接返回测验三种形式"""
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None
    quiz = data.get("quiz", data)
    if not isinstance(quiz, dict):
        return None
    questions = quiz.get("questions")
    if not isinstance(questions, list) or not questions:
        return None
    for question in questions:
        if not isinstance(question, dict):
            return None
        if not isinstance(question.get("question"), str) or question.get("correct_answer") is None:
            return None

    normalized = dict(quiz)
    normalized["title"] = str(quiz.get("title") or "Generated Quiz")
    for key in ("topic", "level", "description"):
        normalized[key] = _optional_str(quiz.get(key))
    normalized["questions"] = [_normalize_question(q) for q in questions]
    return normalized


def _normalize_grading_result(data: Any) -> Optional[Dict[str, Any]]:
    """
    校验并规范化工作流评分结果

    分数取整（四舍五入），空答案转为空字符串；字段缺失或无法转换时返回None，由调用方改为本地评分。
    """
    if not isinstance(data, dict) or not all(key in data for key in _RESULT_KEYS):
        return None
    if not isinstance(data["graded_questions"], list):
        return None

    try:
        result = dict(data)
        result["total_questions"] = int(float(data["total_questions"]))
        result["correct_count"] = int(float(data["correct_count"]))
        result["score_percent"] = round_half_up(float(data["score_percent"]))
        result["passed"] = _as_bool(data["passed"])
        result["feedback"] = _optional_str(data.get("feedback"))
        result["quiz_topic"] = _optional_str(data.get("quiz_topic"))
        result["quiz_title"] = _optional_str(data.get("quiz_title"))

        graded_questions = []
        for item in data["graded_questions"]:
            if not isinstance(item, dict):
                return None
            user_answer = item.get("user_answer")
            graded_questions.append({
                "question": _optional_str(item.get("question")),
                "type": _optional_str(item.get("type")),
                "user_answer": "" if user_answer is None else str(user_answer),
                "correct_answer": _optional_str(item.get("correct_answer")),
                "is_correct": _as_bool(item.get("is_correct")),
            })
        result["graded_questions"] = graded_questions
    except (TypeError, ValueError) as e:
        logger.warning(f"测验评分结果字段无法转换: {e}")
        return None
    return result


class QuizGeneratorService:
    def __init__(self, db: Session, webhook_client: Optional[WebhookClient] = None):
        self.db = db
        self.webhook = webhook_client or WebhookClient()
        self.attempt_repo = QuizAttemptRepository(db)
        self.user_service = UserService(db)
        logger.debug("测验生成服务初始化完成")

    @staticmethod
    def pick_local_quiz() -> Dict[str, Any]:
        """从本地题库随机挑选一套测验"""
        return copy.deepcopy(random.choice(SAMPLE_QUIZZES))

    async def generate_quiz(self, user_id: int, lesson_id: Optional[str] = None) -> Dict[str, Any]:
        """
        生成测验

        Returns:
            dict: quiz(测验内容)、source(webhook/local)、time_limit_seconds
        """
        quiz = None
        source = "webhook"
        try:
            data = await self.webhook.post_json_async(
                settings.quiz_generation_url(),
                {"userId": str(user_id), "lessonId": lesson_id},
            )
            quiz = _extract_generated_quiz(data)
            if quiz is None:
                logger.warning("测验生成工作流返回的数据缺少题目，改用本地题库")
        except WebhookError as e:
            logger.warning(f"测验生成工作流不可用: {e}，改用本地题库")

        if quiz is None:
            quiz = self.pick_local_quiz()
            source = "local"

        self.user_service.record_learning_history(
            user_id=user_id,
            topic=quiz.get("topic") or quiz.get("title") or "General",
            activity_type="quiz_generated",
            details={
                "quiz_title": quiz.get("title"),
                "question_count": len(quiz.get("questions") or []),
            },
        )
        logger.info(f"为用户{user_id}生成测验: {quiz.get('title')} ({source})")

        return {
            "quiz": quiz,
            "source": source,
            "time_limit_seconds": settings.GENERATED_QUIZ_TIME_LIMIT_SECONDS,
        }

    async def submit_generated_quiz(self, user_id: int, quiz: Dict[str, Any],
                                    user_answers: List[Dict[str, Any]],
                                    lesson_id: Optional[str] = None) -> Dict[str, Any]:
        """
        提交生成测验

        Args:
            quiz: 生成测验时返回的测验内容
            user_answers: [{"questionIndex": int, "answer": str}, ...]

        Returns:
            dict: 评分结果，额外包含 graded_by(webhook/local) 和 attempt_id
        """
        answers = {
            int(item["questionIndex"]): str(item.get("answer") or "").strip()
            for item in user_answers
        }
        payload = {
            "userId": str(user_id),
            "lessonId": lesson_id,
            "userAnswers": [
                {"questionIndex": index, "answer": answer}
                for index, answer in sorted(answers.items())
            ],
            "quizData": quiz,
        }

        result = None
        graded_by = "webhook"
        try:
            data = await self.webhook.post_json_async(settings.quiz_grading_url(), payload)
            if isinstance(data, list) and data:
                data = data[0]
            result = _normalize_grading_result(data)
            if result is not None:
                result["quiz_topic"] = result["quiz_topic"] or quiz.get("topic")
                result["quiz_title"] = result["quiz_title"] or quiz.get("title")
                result["feedback"] = result["feedback"] or (PASS_FEEDBACK if result["passed"] else FAIL_FEEDBACK)
            else:
                logger.warning("测验评分工作流返回格式不完整，改为本地评分")
        except WebhookError as e:
            logger.warning(f"测验评分工作流不可用: {e}，改为本地评分")

        if result is None:
            result = grade_locally(quiz, answers)
            graded_by = "local"

        result["userId"] = str(user_id)
        if lesson_id:
            result["lessonId"] = lesson_id
        result["graded_by"] = graded_by
        result["attempt_id"] = self._save_attempt(user_id, answers, result)

        self.user_service.record_learning_history(
            user_id=user_id,
            topic=result.get("quiz_topic") or "General",
            activity_type="quiz_completed",
            details={
                "quiz_title": result.get("quiz_title"),
                "score_percent": result["score_percent"],
                "passed": result["passed"],
            },
        )
        return result

    def _save_attempt(self, user_id: int, answers: Dict[int, str], result: Dict[str, Any]) -> Optional[int]:
        """保存生成测验的作答记录，失败只记录日志"""
        try:
            score_percent = int(result["score_percent"])
            now = utcnow()
            attempt = self.attempt_repo.create(
                user_id=user_id,
                quiz_id=None,
                quiz_title=result.get("quiz_title"),
                quiz_topic=result.get("quiz_topic"),
                answers={str(index): answer for index, answer in answers.items()},
                score=int(result["correct_count"]),
                percentage=score_percent,
                grade=grade_for(score_percent),
                total_questions=int(result["total_questions"]),
                correct_count=int(result["correct_count"]),
                passed=bool(result["passed"]),
                feedback=result.get("feedback"),
                graded_questions=result.get("graded_questions") or [],
                attempt_number=1,
                completed_at=now,
            )
            return attempt.id
        except Exception as e:
            self.db.rollback()
            logger.error(f"保存测验作答记录失败: {e}")
            return None
