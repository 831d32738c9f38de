from unittest.mock import AsyncMock, MagicMock

import pytest

from bharatgpt.content.sample_quizzes import SAMPLE_QUIZZES
from bharatgpt.models.quiz_attempt import QuizAttempt
from bharatgpt.services.quiz_generator_service import (
    FAIL_FEEDBACK, PASS_FEEDBACK, QuizGeneratorService, grade_locally
)
from bharatgpt.utils.webhook_client import WebhookError

QUIZ = {
    "title": "Basic Python Syntax",
    "topic": "Python",
    "questions": [
        {"type": "mcq", "question": "Keyword for functions?", "options": ["func", "def"], "correct_answer": "def"},
        {"type": "true_false", "question": "Python is case-sensitive", "correct_answer": "true"},
        {"type": "short_answer", "question": "Print function?", "correct_answer": "print()"},
    ],
}


def _webhook(return_value=None, side_effect=None):
    webhook = MagicMock()
    webhook.post_json_async = AsyncMock(return_value=return_value, side_effect=side_effect)
    return webhook


def test_grade_locally_is_case_insensitive_and_trimmed():
    result = grade_locally(QUIZ, {0: "  DEF ", 1: "True"})
    assert result["correct_count"] == 2
    assert result["total_questions"] == 3
    assert result["score_percent"] == 67
    assert not result["passed"]
    assert result["feedback"] == FAIL_FEEDBACK
    assert result["graded_questions"][2]["user_answer"] == ""


def test_grade_locally_passing():
    result = grade_locally(QUIZ, {0: "def", 1: "true", 2: "print()"})
    assert result["score_percent"] == 100
    assert result["passed"]
    assert result["feedback"] == PASS_FEEDBACK


async def test_generate_quiz_from_webhook(db_session, student):
    user, _ = student
    webhook = _webhook(return_value=[{"quiz": QUIZ}])

    result = await QuizGeneratorService(db_session, webhook).generate_quiz(user.id, "lesson-1")

    assert result["source"] == "webhook"
    assert result["quiz"]["title"] == "Basic Python Syntax"
    assert result["time_limit_seconds"] == 600
    url, payload = webhook.post_json_async.call_args[0]
    assert payload == {"userId": str(user.id), "lessonId": "lesson-1"}


@pytest.mark.parametrize("response", [{"quiz": {"title": "Empty", "questions": []}}, {"message": "ok"}, []])
async def test_generate_quiz_rejects_unusable_response(db_session, student, response):
    result = await QuizGeneratorService(db_session, _webhook(return_value=response)).generate_quiz(student[0].id)
    assert result["source"] == "local"
    assert result["quiz"]["title"] in [q["title"] for q in SAMPLE_QUIZZES]


async def test_generate_quiz_falls_back_on_webhook_error(db_session, student):
    webhook = _webhook(side_effect=WebhookError("HTTP error! status: 500", status_code=500))
    result = await QuizGeneratorService(db_session, webhook).generate_quiz(student[0].id)
    assert result["source"] == "local"
    assert result["quiz"]["questions"]


async def test_local_catalogue_is_not_mutated(db_session, student):
    service = QuizGeneratorService(db_session, _webhook(side_effect=WebhookError("down")))
    result = await service.generate_quiz(student[0].id)
    result["quiz"]["questions"].clear()
    assert all(q["questions"] for q in SAMPLE_QUIZZES)


async def test_submit_uses_webhook_result(db_session, student):
    user, _ = student
    graded = {
        "total_questions": 3,
        "correct_count": 3,
        "score_percent": 100,
        "passed": True,
        "graded_questions": [],
    }
    webhook = _webhook(return_value=graded)
    answers = [{"questionIndex": 0, "answer": " def "}, {"questionIndex": 1, "answer": "true"}]

    result = await QuizGeneratorService(db_session, webhook).submit_generated_quiz(user.id, QUIZ, answers, "lesson-1")

    assert result["graded_by"] == "webhook"
    assert result["feedback"] == PASS_FEEDBACK
    assert result["quiz_title"] == "Basic Python Syntax"
    payload = webhook.post_json_async.call_args[0][1]
    assert payload["userAnswers"] == [{"questionIndex": 0, "answer": "def"}, {"questionIndex": 1, "answer": "true"}]
    assert payload["quizData"] == QUIZ
    assert payload["lessonId"] == "lesson-1"


async def test_submit_falls_back_to_local_grading_and_saves_attempt(db_session, student):
    user, _ = student
    webhook = _webhook(return_value={"unexpected": True})
    answers = [{"questionIndex": 0, "answer": "def"}, {"questionIndex": 2, "answer": "PRINT()"}]

    result = await QuizGeneratorService(db_session, webhook).submit_generated_quiz(user.id, QUIZ, answers)

    assert result["graded_by"] == "local"
    assert result["score_percent"] == 67
    assert result["userId"] == str(user.id)
    assert "lessonId" not in result

    attempt = db_session.query(QuizAttempt).filter(QuizAttempt.id == result["attempt_id"]).first()
    assert attempt.quiz_id is None
    assert attempt.quiz_title == "Basic Python Syntax"
    assert attempt.grade == "D"
    assert not attempt.passed
    assert attempt.answers == {"0": "def", "2": "PRINT()"}


async def test_generate_quiz_normalizes_loose_question_fields(db_session, student):
    loose = {
        "quiz": {
            "title": None,
            "topic": 42,
            "questions": [
                {"type": None, "question": "2 + 2?", "options": "4, 5", "correct_answer": 4},
                {"question": "Pick one", "options": [1, 2], "correct_answer": "1"},
            ],
        }
    }
    result = await QuizGeneratorService(db_session, _webhook(return_value=loose)).generate_quiz(student[0].id)

    quiz = result["quiz"]
    assert result["source"] == "webhook"
    assert quiz["title"] == "Generated Quiz"
    assert quiz["topic"] == "42"
    assert quiz["questions"][0] == {"type": "mcq", "question": "2 + 2?", "options": None, "correct_answer": "4"}
    assert quiz["questions"][1]["options"] == ["1", "2"]


async def test_submit_normalizes_loose_webhook_result(db_session, student):
    user, _ = student
    graded = {
        "total_questions": 3,
        "correct_count": 2,
        "score_percent": 66.67,
        "passed": "false",
        "feedback": None,
        "graded_questions": [
            {"question": "Keyword for functions?", "type": None, "user_answer": None,
             "correct_answer": 7, "is_correct": False},
        ],
    }
    webhook = _webhook(return_value=[graded])

    result = await QuizGeneratorService(db_session, webhook).submit_generated_quiz(user.id, QUIZ, [])

    assert result["graded_by"] == "webhook"
    assert result["score_percent"] == 67
    assert result["passed"] is False
    assert result["feedback"] == FAIL_FEEDBACK
    assert result["graded_questions"][0] == {
        "question": "Keyword for functions?", "type": None, "user_answer": "",
        "correct_answer": "7", "is_correct": False,
    }
    attempt = db_session.query(QuizAttempt).filter(QuizAttempt.id == result["attempt_id"]).first()
    assert attempt.percentage == 67
    assert attempt.grade == "D"


async def test_submit_grades_locally_when_webhook_result_is_unusable(db_session, student):
    user, _ = student
    graded = {
        "total_questions": 3,
        "correct_count": 3,
        "score_percent": "n/a",
        "passed": True,
        "graded_questions": [],
    }
    answers = [{"questionIndex": 0, "answer": "def"}]

    result = await QuizGeneratorService(db_session, _webhook(return_value=graded)).submit_generated_quiz(
        user.id, QUIZ, answers
    )

    assert result["graded_by"] == "local"
    assert result["score_percent"] == 33
    assert db_session.query(QuizAttempt).count() == 1
