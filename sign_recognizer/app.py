"""
SignRecognizer desktop application.

Main entry point: captures webcam frames, tracks hands with MediaPipe,
classifies signs, announces them and keeps session statistics.

Usage:
    sign-recognizer [--user <id>] [--camera <index>] [--debug]
    sign-recognizer --practice "thank you" [--debug]
    sign-recognizer --list-signs

Exit Codes:
    0 - Success
    1 - Profile error
    2 - Camera error
    3 - Runtime error
"""

import argparse
import signal
import sys
import time
from typing import Optional

import cv2

from .camera_manager import CameraError, CameraManager, select_camera
from .config import (
    DEFAULT_USER_ID,
    EXIT_CAMERA_ERROR,
    EXIT_PROFILE_ERROR,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    LOG_FILENAME,
    SIGN_CATALOG,
    SWAP_HANDEDNESS,
)
from .hand_detector import HandDetector
from .logger import get_logger, setup_logging
from .overlay import draw_hand, draw_result, draw_stats, render_guide, should_refresh
from .pipeline import RecognitionPipeline
from .session import SessionState
from .sign_classifier import Prediction, SignClassifier
from .speech import Pyttsx3Backend, SpeechQueue
from .user_profiles import ProfileLoadError, default_profiles, load_user_profiles

WINDOW_NAME = "Sign Recognizer"
GUIDE_WINDOW_NAME = "Sign Guide"
MAX_CONSECUTIVE_READ_FAILURES = 30


class SignRecognizerApp:
    """
    Real-time sign recognition loop.

    One frame is read, detected and classified at a time; the loop never
    queues frames, so a slow frame simply delays the next read.
    """

    def __init__(
        self,
        pipeline: RecognitionPipeline,
        camera: CameraManager,
        detector: HandDetector,
        debug: bool = False
    ):
        """
        Initialize application.

        Args:
            pipeline: Recognition pipeline (classifier, session, speech).
            camera: Webcam source.
            detector: MediaPipe hand detector.
            debug: Show the preview window with overlays.
        """
        self.pipeline = pipeline
        self.camera = camera
        self.detector = detector
        self.debug = debug

        self._logger = get_logger("App")
        self._running = False
        self._frame_count = 0
        self._start_time = 0.0
        self._displayed: Optional[Prediction] = None

    @property
    def session(self) -> SessionState:
        return self.pipeline.session

    @property
    def displayed(self) -> Optional[Prediction]:
        """Result currently shown in the result panel."""
        return self._displayed

    @property
    def is_running(self) -> bool:
        return self._running

    def initialize(self) -> None:
        """Open the camera, load the detector and start the session."""
        self._logger.info("Initializing sign recognizer...")
        self.camera.open()
        self.detector.initialize()
        if self.pipeline.speech is not None:
            self.pipeline.speech.start()
        self.pipeline.switch_user(self.session.user_id)
        self.session.start()
        self._logger.info("Sign recognizer initialized")

    def process_frame(self, frame) -> Prediction:
        """
        Detect, classify and record one BGR frame.

        Args:
            frame: BGR image from the camera.

        Returns:
            Prediction for the frame.
        """
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        hands = self.detector.detect(rgb)

        prediction = self.pipeline.process(hands.left, hands.right)

        # Compare with the result on screen
        if self._displayed is None or should_refresh(
            self._displayed.sign, self._displayed.confidence, prediction
        ):
            self._displayed = prediction

        if self.debug:
            for hand in hands.hands():
                draw_hand(frame, hand)
            draw_result(frame, self._displayed)
            draw_stats(frame, self.session.stats)

        return prediction

    def run(self) -> None:
        """Run the capture loop until stopped."""
        self._running = True
        self._start_time = time.perf_counter()
        failures = 0

        self._logger.info("Capture started (q/ESC quit, s speak, r reset stats)")
        try:
            while self._running:
                frame = self.camera.read()
                if frame is None:
                    failures += 1
                    if failures >= MAX_CONSECUTIVE_READ_FAILURES:
                        raise CameraError(f"Camera returned no frames {failures} times in a row")
                    continue
                failures = 0

                self.process_frame(frame)
                self._frame_count += 1

                if self.debug:
                    cv2.imshow(WINDOW_NAME, frame)
                    self.handle_key(cv2.waitKey(1) & 0xFF)
        finally:
            self.shutdown()

    def handle_key(self, key: int) -> None:
        """Debug window keys: q/ESC quit, s speak, r reset stats."""
        if key in (ord("q"), 27):
            self.stop()
        elif key == ord("s"):
            self.pipeline.speak_current(self._displayed)
        elif key == ord("r"):
            self._logger.info("Stats reset")
            self.session.stats.start()

    def stop(self) -> None:
        """Request the loop to stop."""
        if self._running:
            self._logger.info("Stopping capture...")
        self._running = False

    def shutdown(self) -> None:
        """Release camera, detector and speech; end the session."""
        self._running = False
        if self.pipeline.speech is not None:
            self.pipeline.speech.stop()
        self.detector.close()
        self.camera.close()
        if self.debug:
            cv2.destroyAllWindows()

        if self._frame_count > 0:
            elapsed = time.perf_counter() - self._start_time
            avg_fps = self._frame_count / elapsed if elapsed > 0 else 0
            self._logger.info(
                f"Capture stopped. Processed {self._frame_count} frames "
                f"in {elapsed:.1f}s ({avg_fps:.1f} FPS average)"
            )
        self._displayed = None
        self.session.stop()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Sign Recognizer - webcam sign detection with speech output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0  Success
  1  Profile error (file not found, invalid JSON)
  2  Camera error (camera not available)
  3  Runtime error (unexpected error)

Examples:
  sign-recognizer --user user1 --debug
  sign-recognizer --profiles profiles.json --user user4
  sign-recognizer --practice "thank you" --debug
"""
    )

    parser.add_argument("--user", "-u", default=DEFAULT_USER_ID, help="User profile id")
    parser.add_argument(
        "--camera", "-c",
        type=int,
        default=-1,
        help="Camera index (default: auto-detect)"
    )
    parser.add_argument("--profiles", "-p", help="JSON file with extra user profiles")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible predictions")
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug mode with preview window"
    )
    parser.add_argument("--no-speech", action="store_true", help="Disable spoken announcements")
    parser.add_argument(
        "--swap-hands",
        action="store_true",
        default=SWAP_HANDEDNESS,
        help="Swap MediaPipe's left/right hand labels (for non-mirrored cameras)"
    )
    parser.add_argument("--no-mirror", action="store_true", help="Do not mirror the camera image")
    parser.add_argument("--practice", metavar="TEXT", help="Show the practice guide for a sign and exit")
    parser.add_argument("--list-signs", action="store_true", help="List known signs and exit")
    parser.add_argument(
        "--log-file",
        default=LOG_FILENAME,
        help=f"Log file name inside the log directory (default: {LOG_FILENAME})"
    )
    parser.add_argument("--no-log-file", action="store_true", help="Log to the console only")

    return parser.parse_args(argv)


def list_signs() -> None:
    for name, emoji in SIGN_CATALOG:
        print(f"{emoji}  {name}")


def show_practice_guide(classifier: SignClassifier, text: str, debug: bool = False) -> bool:
    """
    Print (and optionally draw) the practice guide for a sign.

    Returns:
        True if the sign was found.
    """
    guide = classifier.get_sign_guide(text)
    if not guide.success:
        print(guide.message)
        return False

    print(f'Guide for: "{text}"')
    print(guide.description)
    if debug and guide.skeleton_data:
        cv2.imshow(GUIDE_WINDOW_NAME, render_guide(guide.skeleton_data))
        cv2.waitKey(0)
        cv2.destroyAllWindows()
    return True


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    if args.list_signs:
        list_signs()
        return EXIT_SUCCESS

    logger = setup_logging(
        debug=args.debug,
        log_to_file=not args.no_log_file,
        log_filename=args.log_file
    )
    logger.info("Sign Recognizer starting...")

    try:
        profiles = load_user_profiles(args.profiles) if args.profiles else default_profiles()
    except ProfileLoadError as e:
        logger.error(f"Failed to load profiles: {e}")
        return EXIT_PROFILE_ERROR

    classifier = SignClassifier(profiles=profiles, seed=args.seed)

    if args.practice is not None:
        show_practice_guide(classifier, args.practice, debug=args.debug)
        return EXIT_SUCCESS

    app: Optional[SignRecognizerApp] = None
    try:
        camera_index = select_camera(args.camera)
        speech = None if args.no_speech else SpeechQueue(Pyttsx3Backend())
        pipeline = RecognitionPipeline(classifier, SessionState(user_id=args.user), speech)
        app = SignRecognizerApp(
            pipeline=pipeline,
            camera=CameraManager(camera_index=camera_index, mirror=not args.no_mirror),
            detector=HandDetector(swap_handedness=args.swap_hands),
            debug=args.debug
        )

        def signal_handler(sig, frame):
            logger.info("Received shutdown signal")
            if app:
                app.stop()

        signal.signal(signal.SIGINT, signal_handler)
        # SIGTERM is not available on Windows
        if sys.platform != "win32":
            signal.signal(signal.SIGTERM, signal_handler)

        app.initialize()
        app.run()
        return EXIT_SUCCESS

    except CameraError as e:
        logger.error(f"Camera error: {e}")
        return EXIT_CAMERA_ERROR
    except Exception as e:
        logger.exception(f"Runtime error: {e}")
        return EXIT_RUNTIME_ERROR
    finally:
        if app:
            app.stop()


if __name__ == "__main__":
    sys.exit(main())
