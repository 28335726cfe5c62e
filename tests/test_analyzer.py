import pytest

from analyzer.camera import CameraSession
from analyzer.capture import CapturePipeline
from analyzer.main import CameraAnalyzer, run_console
from analyzer.messages import get_messages
from analyzer.speech import SpeechController
from analyzer.status import StatusKind
from shared.errors import NetworkError, RelayError
from shared.schemas import AnalysisResult

MESSAGES = get_messages("en")


class FakeRelay:
    def __init__(self, result=None, exc=None):
        self.result = result or AnalysisResult(description="pasta", recommendations="add sauce")
        self.exc = exc
        self.calls = []
        self.on_call = None

    def analyze(self, image_data_url, language):
        self.calls.append((image_data_url, language))
        if self.on_call is not None:
            self.on_call()
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def build(platform, status, engine):
    def _build(relay, auto_speak=False, start=True):
        session = CameraSession(platform, status, language="en")
        if start:
            session.activate()
        return CameraAnalyzer(
            session=session,
            pipeline=CapturePipeline(),
            relay=relay,
            speech=SpeechController(engine, status, language="en"),
            status=status,
            language="en",
            auto_speak=auto_speak,
        )

    return _build


def test_snap_requires_streaming(build, status):
    relay = FakeRelay()
    analyzer = build(relay, start=False)

    assert not analyzer.snap()

    assert relay.calls == []
    assert status.status.message == MESSAGES["not_started"]
    assert status.status.kind == StatusKind.ERR


def test_snap_success(build, status):
    relay = FakeRelay()
    analyzer = build(relay)

    assert analyzer.snap()

    image_data_url, language = relay.calls[0]
    assert image_data_url.startswith("data:image/jpeg;base64,")
    assert language == "en"
    assert analyzer.result.description == "pasta"
    assert (analyzer.last_photo.width, analyzer.last_photo.height) == (800, 450)
    assert status.status.message == MESSAGES["analysis_ready"]
    assert not analyzer.is_capturing


def test_snap_relay_error_keeps_partial_fields(build, status):
    relay = FakeRelay(exc=RelayError("Upstream error 503", 502, AnalysisResult()))
    analyzer = build(relay)

    assert not analyzer.snap()

    assert analyzer.result == AnalysisResult()
    assert status.status.message == "Error: Upstream error 503"
    assert status.status.kind == StatusKind.ERR
    assert not analyzer.is_capturing


def test_snap_network_error_clears_fields(build, status):
    relay = FakeRelay(exc=NetworkError("connection refused"))
    analyzer = build(relay)
    analyzer.result = AnalysisResult(description="old", recommendations="old")

    assert not analyzer.snap()

    assert analyzer.result == AnalysisResult()
    assert status.status.message == "Connection error: connection refused"


def test_only_one_capture_in_flight(build, status):
    relay = FakeRelay()
    analyzer = build(relay)
    nested = []
    relay.on_call = lambda: nested.append(analyzer.snap())

    assert analyzer.snap()

    assert nested == [False]
    assert len(relay.calls) == 1


def test_capture_failure(build, platform, status):
    analyzer = build(FakeRelay())
    platform.opened[0].frame = None
    platform.opened[0].stopped = True

    assert not analyzer.snap()
    assert status.status.message == MESSAGES["capture_failed"]


def test_auto_speak_reads_recommendations(build, engine):
    analyzer = build(FakeRelay(), auto_speak=True)
    analyzer.snap()
    assert engine.spoken[0]["text"] == "add sauce"


def test_manual_speak_and_pause(build, engine):
    analyzer = build(FakeRelay())
    analyzer.snap()

    assert analyzer.speak()
    analyzer.pause_speech()
    assert analyzer.resume_speech()
    assert len(engine.spoken) == 2


def test_shutdown_stops_camera(build, platform):
    analyzer = build(FakeRelay())
    analyzer.shutdown()
    assert platform.opened[0].stopped
    assert not analyzer.session.is_streaming


def _feed(monkeypatch, commands):
    lines = iter(commands)

    def _input(prompt=""):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", _input)


def test_console_rejects_unknown_facing_and_releases_camera(build, platform, monkeypatch, capsys):
    analyzer = build(FakeRelay())
    _feed(monkeypatch, ["start front", "quit"])

    run_console(analyzer)

    assert "usage: start [environment|user]" in capsys.readouterr().out
    assert len(platform.opened) == 1
    assert platform.opened[0].stopped
    assert not analyzer.session.is_streaming


def test_console_releases_camera_when_a_command_fails(build, platform, monkeypatch):
    analyzer = build(FakeRelay())
    _feed(monkeypatch, ["snap"])
    monkeypatch.setattr(analyzer, "snap", lambda: 1 / 0)

    with pytest.raises(ZeroDivisionError):
        run_console(analyzer)

    assert platform.opened[0].stopped


def test_console_start_with_facing(build, platform, monkeypatch):
    analyzer = build(FakeRelay(), start=False)
    _feed(monkeypatch, ["start user"])

    run_console(analyzer)

    assert platform.opened[0].facing == "user"
    assert platform.opened[0].stopped
