from unittest.mock import AsyncMock, MagicMock

import pytest

from bharatgpt.models.chat_interaction import ChatInteraction
from bharatgpt.services.chat_service import (
    DEFAULT_REPLY, FALLBACK_REPLY, ChatService, shape_webhook_reply
)
from bharatgpt.utils.webhook_client import WebhookError


def _webhook(return_value=None, side_effect=None):
    webhook = MagicMock()
    webhook.post_json_async = AsyncMock(return_value=return_value, side_effect=side_effect)
    return webhook


@pytest.mark.parametrize("data,expected", [
    ({"response": "Hi", "understanding_level": 4}, ("Hi", 4)),
    ([{"output": "From list"}], ("From list", 3)),
    ({"response": "", "message": "Second key"}, ("Second key", 3)),
    ({"text": "Text key", "understanding_level": 9}, ("Text key", 3)),
    ({"understanding_level": 2}, (DEFAULT_REPLY, 2)),
    ([], (DEFAULT_REPLY, 3)),
    ("plain string", ("plain string", 3)),
])
def test_shape_webhook_reply(data, expected):
    assert shape_webhook_reply(data) == expected


async def test_send_message_persists_interaction(db_session, student):
    user, _ = student
    webhook = _webhook(return_value={"response": "ENGLISH VERSION:\nA loop repeats code.", "understanding_level": 4})

    result = await ChatService(db_session, webhook).send_message(user, "  What is a loop? ", module_id=None)

    assert not result["fallback"]
    assert result["user_message"] == "What is a loop?"
    assert result["understanding_level"] == 4
    assert result["languages"] == {"english": "A loop repeats code."}
    assert "speech" not in result

    interaction = db_session.query(ChatInteraction).filter(ChatInteraction.id == result["interaction_id"]).first()
    assert interaction.ai_response.startswith("ENGLISH VERSION:")

    payload = webhook.post_json_async.call_args[0][1]
    assert payload["message"] == "What is a loop?"
    assert payload["user_id"] == str(user.id)
    assert payload["context"]["user_level"] == "beginner"
    assert payload["context"]["language_preference"] == "gu"
    assert payload["context"]["previous_messages"] == []


async def test_context_holds_last_five_messages(db_session, student):
    user, _ = student
    webhook = _webhook(return_value={"response": "ok"})
    service = ChatService(db_session, webhook)
    for i in range(4):
        await service.send_message(user, f"question {i}")

    context = service.build_context(user.id)
    assert len(context) == 5
    assert context[-1] == {"text": "ok", "is_user": False, "timestamp": context[-1]["timestamp"]}
    assert context[-2]["text"] == "question 3"
    assert context[-2]["is_user"]


async def test_webhook_failure_returns_fallback_without_saving(db_session, student):
    user, _ = student
    webhook = _webhook(side_effect=WebhookError("网络连接错误"))

    result = await ChatService(db_session, webhook).send_message(user, "hello", audio_enabled=True)

    assert result["fallback"]
    assert result["response"] == FALLBACK_REPLY
    assert result["interaction_id"] is None
    assert result["understanding_level"] is None
    assert result["speech"] == {"text": FALLBACK_REPLY, "lang": "en-US"}
    assert db_session.query(ChatInteraction).count() == 0


async def test_blank_message_rejected(db_session, student):
    with pytest.raises(ValueError):
        await ChatService(db_session, _webhook()).send_message(student[0], "   ")


async def test_feedback(db_session, student, admin):
    user, _ = student
    service = ChatService(db_session, _webhook(return_value={"response": "ok"}))
    result = await service.send_message(user, "hi")

    feedback = service.provide_feedback(user.id, result["interaction_id"], "helpful")
    assert feedback.feedback_type == "helpful"

    with pytest.raises(ValueError):
        service.provide_feedback(user.id, result["interaction_id"], "meh")
    # 不能评价别人的对话
    with pytest.raises(ValueError, match="not found"):
        service.provide_feedback(admin[0].id, result["interaction_id"], "helpful")
