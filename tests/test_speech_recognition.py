import pytest

from bharatgpt.utils.speech_recognition import RecognitionAction, RecognitionSession


@pytest.fixture
def session():
    return RecognitionSession(restart_delay_ms=100)


def test_start_returns_language_config(session):
    event = session.start("hindi")
    assert event.action == RecognitionAction.START
    assert event.config.lang == "hi-IN"
    assert event.config.continuous
    assert event.config.interim_results
    assert event.config.max_alternatives == 1
    assert session.is_listening


def test_start_while_listening_switches_language(session):
    session.start("english")
    event = session.start("gujarati")
    assert event.config.lang == "gu-IN"
    assert session.language == "gujarati"
    assert session.is_listening


def test_unsupported_client():
    session = RecognitionSession(supported=False)
    assert session.start("english") is None
    assert not session.is_listening
    assert session.available_languages() == ["english"]


def test_unknown_language(session):
    with pytest.raises(ValueError):
        session.start("tamil")


def test_handle_result_joins_final_transcripts(session):
    results = [
        {"transcript": "old ", "is_final": True},
        {"transcript": "what is ", "is_final": True},
        {"transcript": "html", "is_final": True},
        {"transcript": " maybe", "is_final": False},
    ]
    assert session.handle_result(results, result_index=1) == "what is html"


def test_handle_result_interim_only(session):
    assert session.handle_result([{"transcript": "wha", "is_final": False}]) is None
    assert session.handle_result([{"transcript": "   ", "is_final": True}]) is None


def test_no_speech_while_listening_restarts(session):
    session.start("english")
    event = session.handle_error("no-speech")
    assert event.action == RecognitionAction.RESTART
    assert event.delay_ms == 100
    assert event.config.lang == "en-US"
    assert session.is_listening


def test_no_speech_after_stop_does_nothing(session):
    session.start("english")
    session.stop()
    assert session.handle_error("no-speech").action == RecognitionAction.NONE


def test_other_errors_stop_listening(session):
    session.start("english")
    event = session.handle_error("not-allowed")
    assert event.action == RecognitionAction.ERROR
    assert event.error == "not-allowed"
    assert not session.is_listening
    assert event.to_dict() == {"action": "error", "delay_ms": 0, "error": "not-allowed", "config": None}


def test_end_while_listening_restarts(session):
    session.start("gujarati")
    assert session.handle_end().action == RecognitionAction.RESTART
    session.stop()
    assert session.handle_end().action == RecognitionAction.ENDED
