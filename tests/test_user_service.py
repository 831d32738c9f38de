import pytest

from bharatgpt.models.learning_module import LearningModule
from bharatgpt.services.user_service import UserService


@pytest.fixture
def html_module(db_session):
    return db_session.query(LearningModule).filter(LearningModule.title == "HTML").first()


def test_update_profile(db_session, student):
    user, _ = student
    updated = UserService(db_session).update_profile(user.id, {"full_name": " Asha P ", "language_preference": "hi"})
    assert updated.full_name == "Asha P"
    assert updated.language_preference == "hi"


def test_first_progress_update_creates_row(db_session, student, html_module):
    user, _ = student
    progress = UserService(db_session).update_progress(user.id, html_module.id, time_spent_minutes=12)
    assert progress.status == "in_progress"
    assert progress.time_spent_minutes == 12
    assert progress.last_accessed is not None


def test_progress_is_upserted_and_clamped(db_session, student, html_module):
    user, _ = student
    service = UserService(db_session)
    first = service.update_progress(user.id, html_module.id, understanding_level=9, completion_percentage=140)
    second = service.update_progress(user.id, html_module.id, understanding_level=0)

    assert first.id == second.id
    assert second.understanding_level == 1
    assert second.completion_percentage == 100
    assert len(service.get_progress(user.id)) == 1


def test_completed_status_forces_full_completion(db_session, student, html_module):
    user, _ = student
    progress = UserService(db_session).update_progress(
        user.id, html_module.id, status="completed", completion_percentage=30
    )
    assert progress.completion_percentage == 100
    assert progress.completed_at is not None


def test_progress_validation(db_session, student, html_module):
    user, _ = student
    service = UserService(db_session)
    with pytest.raises(ValueError, match="not found"):
        service.update_progress(user.id, 999, status="completed")
    with pytest.raises(ValueError, match="invalid"):
        service.update_progress(user.id, html_module.id, status="paused")


def test_learning_history(db_session, student):
    user, _ = student
    service = UserService(db_session)
    service.record_learning_history(user.id, "HTML", "module_viewed", {"section": 1})
    service.record_learning_history(user.id, "HTML", "quiz_completed", {"passed": True})

    history = service.get_learning_history(user.id)
    assert [h.activity_type for h in history] == ["quiz_completed", "module_viewed"]
    assert history[0].details == {"passed": True}
