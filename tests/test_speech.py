import pytest

from analyzer.messages import get_messages
from analyzer.speech import SpeechController, SpeechState, Voice, select_voice
from analyzer.status import StatusKind

from conftest import VOICES, FakeEngine

MESSAGES = get_messages("es")


@pytest.fixture
def speech(engine, status):
    return SpeechController(engine, status, language="es", rate=0.95, pitch=1.0)


def test_select_voice_prefers_regional_order():
    assert select_voice(VOICES, "es").name == "mexico"
    assert select_voice(VOICES + [Voice("argentina", "es-AR")], "es").name == "argentina"
    assert select_voice(VOICES, "pt").name == "brazil"


def test_select_voice_falls_back_to_language_prefix():
    assert select_voice([Voice("generic", "es")], "es").name == "generic"
    assert select_voice([Voice("x", "de-DE")], "es") is None


def test_speak_empty_text(speech, engine, status):
    assert not speech.speak("   ")
    assert engine.spoken == []
    assert status.status.message == MESSAGES["no_recommendations"]
    assert status.status.kind == StatusKind.ERR


def test_speak_cancels_previous_and_uses_voice(speech, engine, status):
    assert speech.speak("Sumale queso")

    assert engine.cancels == 1
    call = engine.spoken[0]
    assert call["text"] == "Sumale queso"
    assert call["voice"].name == "mexico"
    assert call["rate"] == 0.95
    assert speech.state == SpeechState.SPEAKING
    assert status.status.message == MESSAGES["playing"]


def test_end_callback_reports_finished(speech, engine, status):
    speech.speak("hola")
    engine.spoken[0]["on_end"]()
    assert speech.state == SpeechState.IDLE
    assert status.status.message == MESSAGES["audio_finished"]


def test_error_callback_reports_error(speech, engine, status):
    speech.speak("hola")
    engine.spoken[0]["on_error"](RuntimeError("boom"))
    assert status.status.kind == StatusKind.ERR
    assert status.status.message == MESSAGES["audio_error"]


def test_stale_callback_is_ignored(speech, engine, status):
    speech.speak("uno")
    speech.speak("dos")
    engine.spoken[0]["on_end"]()
    assert speech.state == SpeechState.SPEAKING
    assert status.status.message == MESSAGES["playing"]


def test_pause_then_resume_restarts_without_true_resume(speech, engine, status):
    speech.speak("pan y queso")
    speech.pause()
    assert speech.state == SpeechState.PAUSED
    assert status.status.message == MESSAGES["paused"]

    # the cancelled utterance's end callback must not reset state
    engine.spoken[0]["on_end"]()
    assert speech.state == SpeechState.PAUSED

    assert speech.resume()
    assert [call["text"] for call in engine.spoken] == ["pan y queso", "pan y queso"]
    assert engine.resumed == 0
    assert speech.state == SpeechState.SPEAKING


def test_true_resume_is_delegated(status):
    engine = FakeEngine(supports_resume=True)
    speech = SpeechController(engine, status, language="es")

    speech.speak("hola")
    speech.pause()
    assert speech.resume()

    assert engine.paused == 1
    assert engine.resumed == 1
    assert len(engine.spoken) == 1


def test_resume_when_not_paused_does_nothing(speech, engine):
    assert not speech.resume()
    assert engine.spoken == []


def test_engine_failure_reports_unavailable(status):
    speech = SpeechController(FakeEngine(fail=True), status, language="es")
    assert not speech.speak("hola")
    assert status.status.message == MESSAGES["tts_unavailable"]
    assert speech.state == SpeechState.IDLE


def test_cancel(speech, engine):
    speech.speak("hola")
    speech.cancel()
    assert speech.state == SpeechState.IDLE
    engine.spoken[0]["on_end"]()
    assert speech.state == SpeechState.IDLE
