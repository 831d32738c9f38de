import pytest

from bharatgpt.models.quiz import Quiz
from bharatgpt.repositories.learning_history_repository import LearningHistoryRepository
from bharatgpt.services.quiz_service import QuizService, calculate_score, grade_for, public_quiz_view

QUESTIONS = [
    {"id": "q1", "question": "2 + 2?", "type": "mcq", "correct_answer": "4", "points": 2},
    {"id": "q2", "question": "HTML heading tag?", "type": "short_answer", "correct_answer": "<h1>", "points": 1},
    {"id": "q3", "question": "Python is compiled to bytecode", "type": "true_false", "correct_answer": "true", "points": 1},
]

POWER_ON_ANSWERS = {
    "q1": "To turn the computer on or off",
    "q2": "The screen to light up and display something",
}


@pytest.mark.parametrize("percentage,grade", [
    (100, "A"), (90, "A"), (89, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F"), (0, "F"),
])
def test_grade_for(percentage, grade):
    assert grade_for(percentage) == grade


def test_calculate_score_by_points():
    result = calculate_score(QUESTIONS, {"q1": "4", "q2": "<H1>", "q3": "true"})
    # 大小写不同不得分
    assert result["score"] == 3
    assert result["total_points"] == 4
    assert result["percentage"] == 75
    assert result["grade"] == "C"
    assert result["correct_count"] == 2
    assert [q["is_correct"] for q in result["graded_questions"]] == [True, False, True]


def test_calculate_score_no_questions():
    result = calculate_score([], {})
    assert result["percentage"] == 0
    assert result["grade"] == "F"


def test_public_view_hides_answers(db_session):
    quiz = db_session.query(Quiz).filter(Quiz.title == "Computer Power On").first()
    view = public_quiz_view(quiz)
    assert view["title"] == "Computer Power On"
    assert all("correct_answer" not in q and "explanation" not in q for q in view["questions"])
    assert view["questions"][0]["options"]


def _power_on_quiz(db_session):
    return db_session.query(Quiz).filter(Quiz.title == "Computer Power On").first()


def test_passing_attempt_issues_certificate(db_session, student):
    user, _ = student
    quiz = _power_on_quiz(db_session)

    result = QuizService(db_session).submit_attempt(user.id, quiz.id, POWER_ON_ANSWERS, time_taken_seconds=90)
    attempt, certificate = result["attempt"], result["certificate"]

    assert attempt.percentage == 100
    assert attempt.grade == "A"
    assert attempt.passed
    assert attempt.attempt_number == 1
    assert attempt.time_taken_minutes == 2  # 1.5 分钟四舍五入
    assert certificate is not None
    assert certificate.certificate_url == f"certificates/{user.id}/{quiz.id}/{attempt.id}.pdf"
    assert certificate.module_id == quiz.module_id

    history = LearningHistoryRepository(db_session).get_user_history(user.id, 10)
    assert history[0].activity_type == "quiz_completed"


def test_failing_attempt_has_no_certificate(db_session, student):
    user, _ = student
    quiz = _power_on_quiz(db_session)

    result = QuizService(db_session).submit_attempt(user.id, quiz.id, {"q1": "To adjust the volume"})
    assert result["attempt"].percentage == 0
    assert not result["attempt"].passed
    assert result["certificate"] is None
    # 未给出用时按时间上限计
    assert result["attempt"].time_taken_minutes == quiz.time_limit_minutes


def test_time_taken_capped_at_limit(db_session, student):
    user, _ = student
    quiz = _power_on_quiz(db_session)
    result = QuizService(db_session).submit_attempt(user.id, quiz.id, {}, time_taken_seconds=10 ** 6)
    assert result["attempt"].time_taken_minutes == quiz.time_limit_minutes


def test_attempt_numbers_and_max_attempts(db_session, student):
    user, _ = student
    quiz = _power_on_quiz(db_session)
    service = QuizService(db_session)

    numbers = [service.submit_attempt(user.id, quiz.id, {})["attempt"].attempt_number for _ in range(quiz.max_attempts)]
    assert numbers == [1, 2, 3]

    with pytest.raises(ValueError, match="maximum attempts"):
        service.submit_attempt(user.id, quiz.id, {})


def test_unknown_quiz(db_session, student):
    with pytest.raises(ValueError, match="not found"):
        QuizService(db_session).submit_attempt(student[0].id, 9999, {})
