"""
Session state for SignRecognizer.

SessionStats accumulates counters while a capture session is active and
is zeroed when capture stops. SessionState is the single state object the
app loop owns and passes around instead of module-level globals.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from .config import DEFAULT_USER_ID, IDLE_LABEL
from .logger import get_logger
from .sign_classifier import SENTINEL_LABELS, Prediction

logger = get_logger("Session")


@dataclass
class SessionStats:
    """Counters for one capture session."""

    signs_detected: int = 0
    confidence_sum: float = 0.0
    phrases_completed: int = 0
    start_time: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.start_time is not None

    @property
    def average_confidence(self) -> float:
        """Mean confidence of counted signs (0 when nothing counted)."""
        if self.signs_detected == 0:
            return 0.0
        return self.confidence_sum / self.signs_detected

    def start(self, now: Optional[float] = None) -> None:
        """Begin a session, zeroing counters."""
        self.reset()
        self.start_time = time.time() if now is None else now

    def record(self, prediction: Prediction, previous_label: Optional[str]) -> bool:
        """
        Count a prediction if it is a new, non-sentinel label.

        Args:
            prediction: Latest prediction.
            previous_label: Label currently displayed.

        Returns:
            True if the prediction was counted.
        """
        if prediction.sign.lower() in SENTINEL_LABELS:
            return False
        if prediction.sign == previous_label:
            return False

        self.signs_detected += 1
        self.confidence_sum += prediction.confidence
        if prediction.phrase_completion:
            self.phrases_completed += 1
        return True

    def reset(self) -> None:
        """Zero all counters and clear the start time."""
        self.signs_detected = 0
        self.confidence_sum = 0.0
        self.phrases_completed = 0
        self.start_time = None

    def elapsed_seconds(self, now: Optional[float] = None) -> int:
        """Whole seconds since start (0 when inactive)."""
        if self.start_time is None:
            return 0
        now = time.time() if now is None else now
        return max(0, int(now - self.start_time))

    def format_elapsed(self, now: Optional[float] = None) -> str:
        """Elapsed time as m:ss."""
        minutes, seconds = divmod(self.elapsed_seconds(now), 60)
        return f"{minutes}:{seconds:02d}"


@dataclass
class SessionState:
    """Mutable UI state shared by the capture loop, stats and speech."""

    user_id: str = DEFAULT_USER_ID
    current_sign: str = IDLE_LABEL
    current_confidence: float = 0.0
    last_spoken_text: str = ""
    stats: SessionStats = field(default_factory=SessionStats)

    def start(self, now: Optional[float] = None) -> None:
        self.stats.start(now)
        logger.info(f"Session started for user '{self.user_id}'")

    def stop(self) -> None:
        logger.info(
            f"Session stopped: {self.stats.signs_detected} signs, "
            f"avg confidence {self.stats.average_confidence:.0f}%, "
            f"{self.stats.phrases_completed} phrases"
        )
        self.stats.reset()
        self.current_sign = IDLE_LABEL
        self.current_confidence = 0.0
        self.last_spoken_text = ""

    def switch_user(self, user_id: str) -> None:
        logger.info(f"Switched to user: {user_id}")
        self.user_id = user_id

    def apply(self, prediction: Prediction) -> bool:
        """
        Fold a prediction into the session.

        Returns:
            True if the stats counted it as a new sign.
        """
        counted = self.stats.record(prediction, self.current_sign)
        self.current_sign = prediction.sign
        self.current_confidence = prediction.confidence
        return counted
