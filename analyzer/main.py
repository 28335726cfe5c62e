# =============================================================================
# Camera Vision Analyzer - Analyzer Orchestrator
# =============================================================================
# Entry point for the analyzer process. Ties together the camera session,
# the capture pipeline, the relay client and the speech controller, and
# drives them from an interactive command prompt.
#
# Flow for one capture:
#   1. Refuse unless the camera is streaming and no analysis is in flight
#   2. Downscale and JPEG-encode the current frame
#   3. POST it to the relay, which asks the vision model
#   4. Show description + recommendations (optionally read them aloud)
# =============================================================================

import argparse
import logging
from typing import Optional

from analyzer.camera import CameraSession, Facing
from analyzer.capture import CapturedImage, CapturePipeline
from analyzer.client import RelayClient
from analyzer.messages import get_messages
from analyzer.speech import SpeechController
from analyzer.status import StatusBoard, StatusKind
from config import get_config
from shared.errors import NetworkError, RelayError
from shared.schemas import AnalysisResult

logger = logging.getLogger(__name__)


class CameraAnalyzer:
    """
    Orchestrator for capture -> analysis -> display -> speech.

    Args:
        session:    CameraSession owning the camera stream.
        pipeline:   CapturePipeline used to encode frames.
        relay:      RelayClient (or anything with ``analyze``).
        speech:     SpeechController for reading recommendations.
        status:     StatusBoard shared with the session and speech controller.
        language:   Reply/message language.
        auto_speak: Read recommendations aloud as soon as they arrive.
    """

    def __init__(
        self,
        session: CameraSession,
        pipeline: CapturePipeline,
        relay: RelayClient,
        speech: SpeechController,
        status: StatusBoard,
        language: str = "es",
        auto_speak: bool = False,
    ):
        self._session = session
        self._pipeline = pipeline
        self._relay = relay
        self._speech = speech
        self._status = status
        self._language = language
        self._messages = get_messages(language)
        self._auto_speak = auto_speak

        self.is_capturing = False
        self.last_photo: Optional[CapturedImage] = None
        self.result = AnalysisResult()

    @property
    def session(self) -> CameraSession:
        return self._session

    def snap(self) -> bool:
        """
        Capture the current frame and analyze it.

        Returns:
            True when a result was received from the relay.
        """
        if not self._session.is_streaming:
            self._status.set_status(self._messages["not_started"], StatusKind.ERR)
            return False
        if self.is_capturing:
            self._status.set_status(self._messages["busy"], StatusKind.WARN)
            return False

        self.is_capturing = True
        try:
            photo = self._pipeline.capture_from(self._session)
            if photo is None:
                self._status.set_status(self._messages["capture_failed"], StatusKind.ERR)
                return False

            self.last_photo = photo
            self._status.set_status(self._messages["analyzing"], StatusKind.WARN)

            try:
                self.result = self._relay.analyze(photo.data_url, self._language)
            except RelayError as exc:
                self.result = exc.result if isinstance(exc.result, AnalysisResult) else AnalysisResult()
                self._status.set_status(self._messages["error"].format(error=exc), StatusKind.ERR)
                return False
            except NetworkError as exc:
                self.result = AnalysisResult()
                self._status.set_status(
                    self._messages["connection_error"].format(error=exc), StatusKind.ERR
                )
                return False

            self._status.set_status(self._messages["analysis_ready"], StatusKind.OK)
            if self._auto_speak and self.result.recommendations.strip():
                self._speech.speak(self.result.recommendations)
            return True
        finally:
            self.is_capturing = False

    def speak(self) -> bool:
        return self._speech.speak(self.result.recommendations)

    def pause_speech(self) -> None:
        self._speech.pause()

    def resume_speech(self) -> bool:
        return self._speech.resume()

    def shutdown(self) -> None:
        self._speech.cancel()
        self._session.deactivate()


# ---------------------------------------------------------------------------
# Console front end
# ---------------------------------------------------------------------------

_HELP = """Commands:
  start [environment|user]   turn the camera on
  stop                       turn the camera off
  facing environment|user    switch camera (restarts if running)
  snap                       capture and analyze a photo
  speak | pause | resume     read the recommendations aloud
  howto                      camera permission guide
  diag                       environment diagnostics
  quit"""


def _print_status(board: StatusBoard) -> None:
    marker = {
        StatusKind.OK: "[ok]",
        StatusKind.ERR: "[error]",
        StatusKind.WARN: "[!]",
        StatusKind.NEUTRAL: "[..]",
    }[board.status.kind]
    print(f"{marker} {board.status.message}")


def _print_result(result: AnalysisResult) -> None:
    print("\n--- Description ---")
    print(result.description or "(empty)")
    print("\n--- Recommendations ---")
    print(result.recommendations or "(empty)")
    print()


def run_console(analyzer: CameraAnalyzer) -> None:
    """Read commands from stdin until ``quit`` or EOF."""
    print(_HELP)
    try:
        _command_loop(analyzer)
    finally:
        analyzer.shutdown()


def _command_loop(analyzer: CameraAnalyzer) -> None:
    session = analyzer.session
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        command, _, argument = line.partition(" ")
        argument = argument.strip()

        if command == "quit":
            break
        elif command == "start":
            if argument and argument not in (Facing.ENVIRONMENT.value, Facing.USER.value):
                print("usage: start [environment|user]")
                continue
            session.activate(Facing(argument) if argument else None)
        elif command == "stop":
            session.deactivate()
        elif command == "facing":
            if argument not in (Facing.ENVIRONMENT.value, Facing.USER.value):
                print("usage: facing environment|user")
                continue
            session.switch_facing(Facing(argument))
        elif command == "snap":
            if analyzer.snap():
                _print_result(analyzer.result)
        elif command == "speak":
            analyzer.speak()
        elif command == "pause":
            analyzer.pause_speech()
        elif command == "resume":
            analyzer.resume_speech()
        elif command == "howto":
            session.show_how_to()
        elif command == "diag":
            for key, value in session.diagnostics().items():
                print(f"  {key:16s}: {value}")
        else:
            print(_HELP)


def main():
    """CLI entry point for the analyzer."""
    parser = argparse.ArgumentParser(
        description="Camera Vision Analyzer — camera client",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--server-url", type=str, default=None,
        help="Relay base URL (e.g., http://127.0.0.1:8000)",
    )
    parser.add_argument(
        "--language", type=str, default=None, choices=["es", "en", "pt"],
        help="Reply and message language (overrides config)",
    )
    parser.add_argument(
        "--facing", type=str, default=Facing.ENVIRONMENT.value,
        choices=[Facing.ENVIRONMENT.value, Facing.USER.value],
        help="Initial camera facing mode",
    )
    parser.add_argument(
        "--auto-speak", action="store_true",
        help="Read recommendations aloud as soon as they arrive",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Imported here so the OpenCV/espeak backends are only needed at runtime
    from analyzer.opencv_camera import OpenCVCameraPlatform
    from analyzer.speech import SubprocessSpeechEngine

    config = get_config()
    if args.server_url is not None:
        config.relay_url = args.server_url
    if args.language is not None:
        config.default_language = args.language
    if args.auto_speak:
        config.auto_speak = True
    language = config.default_language

    status = StatusBoard()
    status.subscribe(_print_status)

    platform = OpenCVCameraPlatform(
        origin=config.relay_url,
        device_indexes={
            Facing.ENVIRONMENT.value: config.camera_index_environment,
            Facing.USER.value: config.camera_index_user,
        },
    )
    session = CameraSession(
        platform,
        status,
        language=language,
        width_hint=config.camera_width_hint,
        height_hint=config.camera_height_hint,
    )
    session.facing = Facing(args.facing)

    analyzer = CameraAnalyzer(
        session=session,
        pipeline=CapturePipeline(config.capture_max_dimension, config.capture_quality),
        relay=RelayClient(config.relay_url, timeout=config.request_timeout_seconds + 5),
        speech=SpeechController(
            SubprocessSpeechEngine(config.speech_command),
            status,
            language=language,
            rate=config.speech_rate,
            pitch=config.speech_pitch,
        ),
        status=status,
        language=language,
        auto_speak=config.auto_speak,
    )

    print("\n" + "=" * 60)
    print("  Camera Vision Analyzer — Camera Client")
    print("=" * 60)
    print(f"  Relay      : {config.relay_url}")
    print(f"  Language   : {language}")
    print(f"  Max size   : {config.capture_max_dimension}px @ q={config.capture_quality}")
    print(f"  Auto-speak : {config.auto_speak}")
    print("=" * 60 + "\n")

    run_console(analyzer)


if __name__ == "__main__":
    main()
