"""Tests for the capture loop with fake camera, detector and speech."""

import numpy as np
import pytest

from sign_recognizer.app import MAX_CONSECUTIVE_READ_FAILURES, SignRecognizerApp
from sign_recognizer.camera_manager import CameraError
from sign_recognizer.config import IDLE_LABEL
from sign_recognizer.hand_detector import DetectedHands
from sign_recognizer.landmarks import hand_frame_from_points
from sign_recognizer.pipeline import RecognitionPipeline
from sign_recognizer.session import SessionState
from sign_recognizer.sign_classifier import Prediction, SignClassifier


def _frame():
    return np.zeros((4, 4, 3), dtype=np.uint8)


class FakeCamera:
    """Serves queued frames, then None forever."""

    def __init__(self, frames=()):
        self.frames = list(frames)
        self.is_open = False
        self.reads = 0

    def open(self):
        self.is_open = True

    def close(self):
        self.is_open = False

    def read(self):
        self.reads += 1
        if self.frames:
            return self.frames.pop(0)
        return None


class FakeDetector:
    """Returns the same hands every frame and runs an optional per-frame hook."""

    def __init__(self, hands=None, on_detect=None):
        self.hands = hands or DetectedHands()
        self.on_detect = on_detect
        self.initialized = False
        self.closed = False
        self.calls = 0

    def initialize(self):
        self.initialized = True

    def close(self):
        self.closed = True

    def detect(self, rgb):
        self.calls += 1
        if self.on_detect:
            self.on_detect(self.calls)
        return self.hands


class StubSpeech:
    def __init__(self):
        self.said = []
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def say(self, text):
        self.said.append(text)
        return True


class ScriptedPipeline(RecognitionPipeline):
    """Feeds predetermined predictions through the session."""

    def __init__(self, predictions):
        super().__init__(SignClassifier(seed=0), SessionState(), StubSpeech())
        self._script = iter(predictions)

    def process(self, left_hand=None, right_hand=None):
        prediction = next(self._script)
        self.session.apply(prediction)
        self.last_prediction = prediction
        return prediction


@pytest.fixture
def hello_hands(hello_points):
    return DetectedHands(right=hand_frame_from_points(hello_points, "Right"))


@pytest.fixture
def pipeline(fixed_random):
    # 0.9 never triggers a phrase completion
    return RecognitionPipeline(SignClassifier(rng=fixed_random(0.9)), SessionState(), StubSpeech())


def test_initialize_opens_everything(pipeline):
    camera = FakeCamera()
    detector = FakeDetector()
    app = SignRecognizerApp(pipeline, camera, detector)

    app.initialize()

    assert camera.is_open
    assert detector.initialized
    assert pipeline.speech.started
    assert app.session.stats.is_active


def test_process_frame(pipeline, hello_hands):
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector(hello_hands))
    app.initialize()

    prediction = app.process_frame(_frame())

    assert prediction.sign == "hello"
    assert app.displayed is prediction
    assert pipeline.speech.said == ["hello"]
    assert app.session.stats.signs_detected == 1


def test_debug_frame_gets_overlay(pipeline, hello_hands):
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector(hello_hands), debug=True)
    app.initialize()
    frame = np.zeros((120, 160, 3), dtype=np.uint8)

    app.process_frame(frame)

    assert frame.any()


def test_read_failures_raise_and_shut_down(pipeline, hello_hands):
    camera = FakeCamera([_frame(), _frame()])
    detector = FakeDetector(hello_hands)
    app = SignRecognizerApp(pipeline, camera, detector)
    app.initialize()

    with pytest.raises(CameraError):
        app.run()

    assert camera.reads == 2 + MAX_CONSECUTIVE_READ_FAILURES
    assert not camera.is_open
    assert detector.closed
    assert pipeline.speech.stopped
    assert not app.is_running


def test_shutdown_zeroes_session(pipeline, hello_hands):
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector(hello_hands))
    app.initialize()
    app.process_frame(_frame())
    assert app.session.stats.signs_detected == 1

    app.shutdown()

    stats = app.session.stats
    assert stats.signs_detected == 0
    assert stats.confidence_sum == 0.0
    assert not stats.is_active
    assert app.session.current_sign == IDLE_LABEL
    assert app.displayed is None


def test_quit_key_ends_loop(pipeline, hello_hands):
    holder = {}

    def press_quit(call):
        if call == 3:
            holder["app"].handle_key(ord("q"))

    camera = FakeCamera([_frame() for _ in range(10)])
    detector = FakeDetector(hello_hands, on_detect=press_quit)
    app = SignRecognizerApp(pipeline, camera, detector)
    holder["app"] = app
    app.initialize()

    app.run()

    assert detector.calls == 3
    assert not app.is_running
    assert not camera.is_open


def test_escape_key_ends_loop(pipeline):
    holder = {}
    detector = FakeDetector(on_detect=lambda call: holder["app"].handle_key(27))
    app = SignRecognizerApp(pipeline, FakeCamera([_frame(), _frame()]), detector)
    holder["app"] = app
    app.initialize()

    app.run()

    assert detector.calls == 1


def test_speak_key_uses_displayed_result(hello_hands, fixed_random):
    speech = StubSpeech()
    # 0.0 always attaches the hello phrase completion
    pipeline = RecognitionPipeline(SignClassifier(rng=fixed_random(0.0)), SessionState(), speech)
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector(hello_hands))
    app.initialize()
    app.process_frame(_frame())

    app.handle_key(ord("s"))

    assert speech.said == ["Hello there!", "Hello there!"]


def test_speak_key_ignores_idle(pipeline):
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector())
    app.initialize()

    app.handle_key(ord("s"))

    assert pipeline.speech.said == []


def test_reset_key_restarts_stats(pipeline, hello_hands):
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector(hello_hands))
    app.initialize()
    app.process_frame(_frame())

    app.handle_key(ord("r"))

    assert app.session.stats.signs_detected == 0
    assert app.session.stats.is_active


def test_refresh_compares_with_displayed_result():
    pipeline = ScriptedPipeline([
        Prediction("hello", 90.0),
        Prediction("hello", 93.0),
        Prediction("hello", 96.0),
        Prediction("hello", 97.0),
        Prediction("yes", 97.0),
    ])
    app = SignRecognizerApp(pipeline, FakeCamera(), FakeDetector())
    app.initialize()

    shown = []
    for _ in range(5):
        app.process_frame(_frame())
        shown.append((app.displayed.sign, app.displayed.confidence))

    assert shown == [
        ("hello", 90.0),
        ("hello", 90.0),
        # Drifted 6 points from what is on screen
        ("hello", 96.0),
        ("hello", 96.0),
        ("yes", 97.0),
    ]
