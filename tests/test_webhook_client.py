from unittest.mock import MagicMock, patch

import pytest
import requests

from bharatgpt.utils.webhook_client import WebhookClient, WebhookError

URL = "https://n8n.example.com/webhook/chat"


def _response(status=200, json_data=None, json_error=False):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.text = "<html>oops</html>"
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    return response


def test_post_json_returns_parsed_body():
    client = WebhookClient(timeout=5)
    with patch.object(client.session, "post", return_value=_response(json_data={"response": "hi"})) as post:
        assert client.post_json(URL, {"message": "hello"}) == {"response": "hi"}
    post.assert_called_once_with(URL, json={"message": "hello"}, timeout=5)


def test_missing_url():
    with pytest.raises(WebhookError):
        WebhookClient().post_json("", {})


def test_non_2xx_status():
    client = WebhookClient()
    with patch.object(client.session, "post", return_value=_response(status=502)):
        with pytest.raises(WebhookError) as exc_info:
            client.post_json(URL, {})
    assert exc_info.value.status_code == 502
    assert "502" in str(exc_info.value)


def test_invalid_json():
    client = WebhookClient()
    with patch.object(client.session, "post", return_value=_response(json_error=True)):
        with pytest.raises(WebhookError):
            client.post_json(URL, {})


@pytest.mark.parametrize("error", [
    requests.exceptions.Timeout(),
    requests.exceptions.ConnectionError(),
    requests.exceptions.InvalidURL(),
])
def test_transport_errors(error):
    client = WebhookClient()
    with patch.object(client.session, "post", side_effect=error):
        with pytest.raises(WebhookError):
            client.post_json(URL, {})


async def test_post_json_async():
    client = WebhookClient()
    with patch.object(client.session, "post", return_value=_response(json_data=[{"output": "x"}])):
        assert await client.post_json_async(URL, {}) == [{"output": "x"}]
