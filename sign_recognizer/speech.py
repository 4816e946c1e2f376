"""
Speech output for SignRecognizer.

Announces recognised signs through a text-to-speech backend. Only one
utterance plays at a time; further requests wait in a short FIFO behind
it, except a request for the text already playing, which is dropped.
When the FIFO is full the oldest waiting request is discarded so speech
never lags far behind the video.
"""

import threading
from collections import deque
from typing import Optional, Protocol

try:
    import pyttsx3
except ImportError as e:
    raise ImportError(
        "pyttsx3 is required for speech output. Install with: pip install pyttsx3"
    ) from e

from .config import (
    SPEECH_BASE_WPM,
    SPEECH_MAX_PENDING,
    SPEECH_MIN_CONFIDENCE,
    SPEECH_PITCH,
    SPEECH_RATE,
    SPEECH_VOLUME,
)
from .logger import get_logger
from .sign_classifier import Prediction

logger = get_logger("Speech")


class SpeechBackend(Protocol):
    """Blocking text-to-speech engine."""

    def speak(self, text: str, rate: float, pitch: float, volume: float) -> None:
        ...


class Pyttsx3Backend:
    """
    Offline text-to-speech via pyttsx3.

    The engine is created lazily on the speaking thread, since pyttsx3
    drivers are bound to the thread that initialised them.
    """

    def __init__(self, voice_id: Optional[str] = None):
        self.voice_id = voice_id
        self._engine = None

    def _get_engine(self):
        if self._engine is None:
            self._engine = pyttsx3.init()
            if self.voice_id:
                self._engine.setProperty("voice", self.voice_id)
            logger.debug("pyttsx3 engine initialized")
        return self._engine

    def speak(self, text: str, rate: float, pitch: float, volume: float) -> None:
        # pyttsx3 has no pitch control
        engine = self._get_engine()
        engine.setProperty("rate", int(SPEECH_BASE_WPM * rate))
        engine.setProperty("volume", max(0.0, min(1.0, volume)))
        engine.say(text)
        engine.runAndWait()


class SpeechQueue:
    """
    One-at-a-time announcement queue served by a daemon worker thread.

    Usage:
        speech = SpeechQueue(Pyttsx3Backend())
        speech.start()
        speech.say("hello")
        ...
        speech.stop()
    """

    def __init__(
        self,
        backend: SpeechBackend,
        rate: float = SPEECH_RATE,
        pitch: float = SPEECH_PITCH,
        volume: float = SPEECH_VOLUME,
        max_pending: int = SPEECH_MAX_PENDING
    ):
        """
        Initialize speech queue.

        Args:
            backend: Blocking TTS backend.
            rate: Speaking rate multiplier.
            pitch: Pitch multiplier (backend permitting).
            volume: Volume in [0, 1].
            max_pending: Utterances that may wait behind the current one.
        """
        if max_pending < 1:
            raise ValueError(f"max_pending must be at least 1, got {max_pending}")

        self.backend = backend
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        self.max_pending = max_pending

        self._cond = threading.Condition()
        self._queue: deque[str] = deque(maxlen=max_pending)
        self._current: Optional[str] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the worker thread."""
        with self._cond:
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._worker_loop, name="SpeechQueue", daemon=True)
        self._thread.start()
        logger.debug("Speech worker started")

    def stop(self, timeout: float = 1.0) -> None:
        """Stop the worker and drop queued utterances."""
        with self._cond:
            self._running = False
            self._queue.clear()
            self._cond.notify_all()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.debug("Speech worker stopped")

    @property
    def is_speaking(self) -> bool:
        with self._cond:
            return self._current is not None

    @property
    def current_text(self) -> Optional[str]:
        with self._cond:
            return self._current

    def pending(self) -> list[str]:
        """Texts waiting behind the current utterance."""
        with self._cond:
            return list(self._queue)

    def say(self, text: str) -> bool:
        """
        Request an announcement.

        Args:
            text: Text to speak.

        Returns:
            True if queued, False if empty or already playing.
        """
        if not text:
            return False

        with self._cond:
            if text == self._current:
                logger.debug(f"Skipping duplicate utterance: {text!r}")
                return False
            if len(self._queue) == self.max_pending:
                logger.debug(f"Speech queue full, dropping stale utterance: {self._queue[0]!r}")
            self._queue.append(text)
            self._cond.notify_all()
        return True

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until nothing is playing or queued.

        Returns:
            True if idle, False on timeout.
        """
        with self._cond:
            return self._cond.wait_for(
                lambda: self._current is None and not self._queue,
                timeout=timeout
            )

    def _worker_loop(self) -> None:
        while True:
            with self._cond:
                while self._running and not self._queue:
                    self._cond.wait()
                if not self._running:
                    return
                text = self._queue.popleft()
                self._current = text

            try:
                logger.debug(f"Speaking: {text!r}")
                self.backend.speak(text, self.rate, self.pitch, self.volume)
            except Exception as e:
                logger.error(f"Speech synthesis error: {e}")
            finally:
                with self._cond:
                    self._current = None
                    self._cond.notify_all()


def should_announce(
    prediction: Prediction,
    last_spoken: str,
    min_confidence: float = SPEECH_MIN_CONFIDENCE
) -> bool:
    """
    Decide whether a prediction is worth announcing.

    Args:
        prediction: Latest prediction.
        last_spoken: Text announced most recently.
        min_confidence: Confidence that must be exceeded.

    Returns:
        True for a new, confident, non-sentinel result.
    """
    if not prediction.is_hand_detected:
        return False
    return prediction.spoken_text != last_spoken and prediction.confidence > min_confidence
