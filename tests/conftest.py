import json

import numpy as np
import pytest

from analyzer.camera import CameraAcquisitionError
from analyzer.speech import Voice
from analyzer.status import StatusBoard
from config import Config

API_KEY_ENV = "TEST_VISION_API_KEY"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeSession:
    """Stands in for requests.Session; records every POST."""

    def __init__(self, response=None, exc=None):
        self.headers = {}
        self.calls = []
        self._response = response
        self._exc = exc

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers or {}, "timeout": timeout})
        if self._exc is not None:
            raise self._exc
        return self._response


class FakeStream:
    def __init__(self, facing, frame=None):
        self.facing = facing
        self.frame = frame if frame is not None else np.zeros((720, 1280, 3), dtype=np.uint8)
        self.stopped = False

    def read_frame(self):
        return None if self.stopped else self.frame

    def stop(self):
        self.stopped = True


class FakePlatform:
    family = "linux"

    def __init__(
        self,
        secure=True,
        media=True,
        embedded=False,
        permission="prompt",
        permission_api=True,
        open_error=None,
    ):
        self.secure = secure
        self.media = media
        self.embedded = embedded
        self.permission = permission
        self.permission_api = permission_api
        self.open_error = open_error
        self.opened = []

    def supports_media(self):
        return self.media

    def is_secure_context(self):
        return self.secure

    def in_embedded_frame(self):
        return self.embedded

    def supports_permission_query(self):
        return self.permission_api

    def query_permission(self):
        if isinstance(self.permission, Exception):
            raise self.permission
        return self.permission

    def open_stream(self, facing, width, height):
        if self.open_error is not None:
            raise CameraAcquisitionError(self.open_error)
        stream = FakeStream(facing)
        self.opened.append(stream)
        return stream

    def describe(self):
        return {"protocol": "https:", "origin": "https://relay.example", "platform": "fake"}


@pytest.fixture
def config(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV, "test-key")
    cfg = Config()
    cfg.api_key_env = API_KEY_ENV
    cfg.provider = "gateway"
    cfg.endpoint_url = ""
    cfg.model = ""
    cfg.allowed_origins = []
    cfg.default_language = "es"
    return cfg


@pytest.fixture
def status():
    return StatusBoard()


@pytest.fixture
def platform():
    return FakePlatform()


VOICES = [
    Voice("default", "en-US"),
    Voice("spain", "es-ES"),
    Voice("mexico", "es_MX"),
    Voice("brazil", "pt-BR"),
]


class FakeEngine:
    def __init__(self, supports_resume=False, voices=VOICES, fail=False):
        self.supports_resume = supports_resume
        self._voices = list(voices)
        self.fail = fail
        self.spoken = []
        self.cancels = 0
        self.paused = 0
        self.resumed = 0

    def voices(self):
        return self._voices

    def speak(self, text, voice, rate, pitch, on_end, on_error):
        if self.fail:
            raise OSError("no synthesizer")
        self.spoken.append(
            {"text": text, "voice": voice, "rate": rate, "pitch": pitch,
             "on_end": on_end, "on_error": on_error}
        )

    def pause(self):
        self.paused += 1

    def resume(self):
        self.resumed += 1

    def cancel(self):
        self.cancels += 1


@pytest.fixture
def engine():
    return FakeEngine()
