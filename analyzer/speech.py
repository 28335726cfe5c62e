# =============================================================================
# Camera Vision Analyzer - Speech Controller
# =============================================================================
# Provides the SpeechController class, the single owner of the speech device.
# Auto-play on a new result and manual play/pause/resume all go through it,
# serialized by one lock, so callers never touch the engine directly.
#
# Engines without true resume (SubprocessSpeechEngine) restart the last
# utterance from its beginning on resume. This is an accepted limitation.
# =============================================================================

import logging
import subprocess
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from analyzer.messages import get_messages
from analyzer.status import StatusBoard, StatusKind

logger = logging.getLogger(__name__)

# Preferred regional variants per language, best first
VOICE_PREFERENCES = {
    "es": ("es-AR", "es-MX", "es-US", "es-419", "es-ES"),
    "en": ("en-US", "en-GB", "en-AU", "en-CA"),
    "pt": ("pt-BR", "pt-PT"),
}


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


class SpeechEngine(Protocol):
    supports_resume: bool

    def voices(self) -> List[Voice]:
        ...

    def speak(
        self,
        text: str,
        voice: Optional[Voice],
        rate: float,
        pitch: float,
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...

    def cancel(self) -> None:
        ...


def _normalize_tag(tag: str) -> str:
    return tag.replace("_", "-").lower()


def select_voice(voices: Sequence[Voice], language: str) -> Optional[Voice]:
    """
    Pick the best voice for a language.

    Order: preferred regional tags (in preference order), then any voice whose
    tag starts with the language, else None (engine default).
    """
    for preferred in VOICE_PREFERENCES.get(language, ()):
        wanted = _normalize_tag(preferred)
        for voice in voices:
            if _normalize_tag(voice.lang) == wanted:
                return voice
    for voice in voices:
        if _normalize_tag(voice.lang).startswith(language.lower()):
            return voice
    return None


class SpeechState(str, Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


class SpeechController:
    """
    Serialized front end to a SpeechEngine.

    Args:
        engine:   The speech device.
        status:   StatusBoard receiving playback status.
        language: Language used for voice selection and messages.
        rate:     Speaking rate multiplier.
        pitch:    Pitch multiplier.
    """

    def __init__(
        self,
        engine: SpeechEngine,
        status: StatusBoard,
        language: str = "es",
        rate: float = 0.95,
        pitch: float = 1.0,
    ):
        self._engine = engine
        self._status = status
        self._language = language
        self._messages = get_messages(language)
        self._rate = rate
        self._pitch = pitch
        self._lock = threading.RLock()
        self._text = ""
        # Bumped on every new utterance so callbacks from a cancelled one are ignored
        self._generation = 0
        self.state = SpeechState.IDLE

    def speak(self, text: str) -> bool:
        """
        Start reading ``text``, interrupting any utterance in progress.

        Returns:
            True if playback started.
        """
        text = (text or "").strip()
        if not text:
            self._status.set_status(self._messages["no_recommendations"], StatusKind.ERR)
            return False
        with self._lock:
            self._engine.cancel()
            self._text = text
            return self._start()

    def pause(self) -> None:
        with self._lock:
            if self.state != SpeechState.SPEAKING:
                return
            if self._engine.supports_resume:
                self._engine.pause()
            else:
                self._generation += 1
                self._engine.cancel()
            self.state = SpeechState.PAUSED
            self._status.set_status(self._messages["paused"], StatusKind.OK)

    def resume(self) -> bool:
        """
        Continue after pause.

        Returns:
            True if playback is running afterwards.
        """
        with self._lock:
            if self.state != SpeechState.PAUSED:
                return self.state == SpeechState.SPEAKING
            if self._engine.supports_resume:
                self._engine.resume()
                self.state = SpeechState.SPEAKING
                self._status.set_status(self._messages["playing"], StatusKind.OK)
                return True
            logger.debug("Engine has no true resume; restarting utterance")
            return self._start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self._engine.cancel()
            self.state = SpeechState.IDLE

    def _start(self) -> bool:
        self._generation += 1
        generation = self._generation
        voice = select_voice(self._engine.voices(), self._language)
        try:
            self._engine.speak(
                self._text,
                voice,
                self._rate,
                self._pitch,
                on_end=lambda: self._on_end(generation),
                on_error=lambda exc: self._on_error(generation, exc),
            )
        except Exception:
            logger.exception("Speech engine failed to start")
            self.state = SpeechState.IDLE
            self._status.set_status(self._messages["tts_unavailable"], StatusKind.ERR)
            return False
        self.state = SpeechState.SPEAKING
        self._status.set_status(self._messages["playing"], StatusKind.OK)
        return True

    def _on_end(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self.state = SpeechState.IDLE
            self._status.set_status(self._messages["audio_finished"], StatusKind.OK)

    def _on_error(self, generation: int, exc: Exception) -> None:
        with self._lock:
            if generation != self._generation:
                return
            logger.error("Speech playback error: %s", exc)
            self.state = SpeechState.IDLE
            self._status.set_status(self._messages["audio_error"], StatusKind.ERR)


class SubprocessSpeechEngine:
    """
    Speech through an ``espeak``-compatible command-line synthesizer.

    No true pause: pausing stops the process, and SpeechController restarts
    the utterance on resume.

    Args:
        command: Executable name, e.g. "espeak-ng".
    """

    supports_resume = False

    def __init__(self, command: str = "espeak-ng"):
        self._command = command
        self._process: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()

    def voices(self) -> List[Voice]:
        try:
            result = subprocess.run(
                [self._command, "--voices"], capture_output=True, text=True, timeout=5, check=True
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("Could not list voices from %s: %s", self._command, exc)
            return []
        voices = []
        # Columns: Pty Language Age/Gender VoiceName File Other
        for line in result.stdout.splitlines()[1:]:
            parts = line.split()
            if len(parts) >= 4:
                voices.append(Voice(name=parts[3], lang=parts[1]))
        return voices

    def speak(self, text, voice, rate, pitch, on_end, on_error) -> None:
        # espeak: -s words per minute (default 175), -p pitch 0-99 (default 50)
        args = [
            self._command,
            "-s", str(int(175 * rate)),
            "-p", str(max(0, min(99, int(50 * pitch)))),
        ]
        if voice is not None:
            args += ["-v", voice.lang]
        args.append(text)

        with self._lock:
            self._process = subprocess.Popen(
                args, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE
            )
            process = self._process

        def _wait():
            _, stderr = process.communicate()
            if process.returncode == 0:
                on_end()
            elif process.returncode > 0:
                on_error(RuntimeError(stderr.decode(errors="replace").strip() or "speech failed"))
            # negative return code: terminated by cancel()

        threading.Thread(target=_wait, daemon=True).start()

    def pause(self) -> None:
        self.cancel()

    def resume(self) -> None:
        logger.debug("%s cannot resume mid-utterance; ignoring", self._command)

    def cancel(self) -> None:
        with self._lock:
            if self._process is not None and self._process.poll() is None:
                self._process.terminate()
            self._process = None
