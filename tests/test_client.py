import pytest
import requests

from analyzer.client import RelayClient
from shared.errors import NetworkError, RelayError

from conftest import FakeResponse, FakeSession

IMAGE = "data:image/jpeg;base64,/9j/4AAQ"


def _client(session):
    client = RelayClient("http://127.0.0.1:8000/", timeout=35)
    client._session = session
    return client


def test_posts_to_vision_endpoint():
    session = FakeSession(FakeResponse(200, {"description": "d", "recommendations": "r"}))

    result = _client(session).analyze(IMAGE, "pt")

    assert (result.description, result.recommendations) == ("d", "r")
    call = session.calls[0]
    assert call["url"] == "http://127.0.0.1:8000/api/vision"
    assert call["json"] == {"image_data_url": IMAGE, "language": "pt"}
    assert call["timeout"] == 35


def test_missing_fields_become_empty():
    session = FakeSession(FakeResponse(200, {"description": None}))
    result = _client(session).analyze(IMAGE, "es")
    assert result.description == ""
    assert result.recommendations == ""


def test_error_reply_raises_relay_error():
    body = {"error": "AI_GATEWAY_API_KEY is not configured", "description": "", "recommendations": ""}
    session = FakeSession(FakeResponse(500, body))

    with pytest.raises(RelayError) as excinfo:
        _client(session).analyze(IMAGE, "es")

    assert str(excinfo.value) == "AI_GATEWAY_API_KEY is not configured"
    assert excinfo.value.status_code == 500
    assert excinfo.value.result.description == ""


def test_error_without_body_uses_status():
    session = FakeSession(FakeResponse(504, body=None, text="gateway timeout"))
    with pytest.raises(RelayError, match="HTTP 504"):
        _client(session).analyze(IMAGE, "es")


def test_connection_failure_raises_network_error():
    session = FakeSession(exc=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        _client(session).analyze(IMAGE, "es")
    assert len(session.calls) == 1
