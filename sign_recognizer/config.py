"""
Configuration constants for SignRecognizer.

This module contains all tunable parameters for camera capture,
hand detection, sign classification, speech output and logging.
"""

from dataclasses import dataclass
from typing import Final


# Camera configuration
CAMERA_WIDTH: Final[int] = 640
CAMERA_HEIGHT: Final[int] = 480
CAMERA_FPS: Final[int] = 30
DEFAULT_CAMERA_INDEX: Final[int] = 0
CAMERA_PROBE_LIMIT: Final[int] = 5  # Indices tried by select_camera()

# MediaPipe configuration
MEDIAPIPE_MODEL_COMPLEXITY: Final[int] = 1
MEDIAPIPE_MAX_NUM_HANDS: Final[int] = 2  # Left and right are classified separately
MEDIAPIPE_MIN_DETECTION_CONFIDENCE: Final[float] = 0.5
MEDIAPIPE_MIN_TRACKING_CONFIDENCE: Final[float] = 0.5

# MediaPipe labels handedness as if the image were a mirrored selfie.
# Set to True when the camera feed is not mirrored before detection.
SWAP_HANDEDNESS: Final[bool] = False

# Hand frame shape
HAND_LANDMARK_COUNT: Final[int] = 21

# =============================================================================
# Sign Classification
# =============================================================================

# Sentinel labels (never counted as detections)
NO_HAND_LABEL: Final[str] = "no hand detected"
IDLE_LABEL: Final[str] = "Ready to start..."
DEFAULT_USER_ID: Final[str] = "default"

# Closed vocabulary, in display-grid order
KNOWN_SIGNS: Final[tuple[str, ...]] = (
    "hello", "thank_you", "yes", "no", "i_love_you", "help",
    "water", "food", "good", "bad", "more", "please", "sorry",
    "name", "home", "friends", "learn",
)

# Rule-based gesture thresholds
GREETING_ALIGNMENT_TOLERANCE: Final[float] = 0.08  # Max spread of non-thumb tip y values
THUMB_EXTENSION_RATIO: Final[float] = 0.9  # Direct CMC->TIP vs. summed segment lengths
THUMB_SEPARATION_RATIO: Final[float] = 0.5  # Of wrist->index-knuckle distance
RULE_CONFIDENCE: Final[float] = 95.0

# Random fallback ("adaptive" simulation)
FALLBACK_CONFIDENCE_MIN: Final[float] = 30.0
FALLBACK_CONFIDENCE_MAX: Final[float] = 99.0  # Exclusive
ALTERNATIVES_CONFIDENCE_THRESHOLD: Final[float] = 80.0
MAX_ALTERNATIVES: Final[int] = 3
CONFIDENCE_DECIMALS: Final[int] = 2

# Phrase completion: label -> (probability, phrase)
PHRASE_COMPLETIONS: Final[dict[str, tuple[float, str]]] = {
    "thank_you": (0.3, "Thank you very much!"),
    "hello": (0.3, "Hello there!"),
    "yes": (0.4, "Yes, I agree!"),
}

# =============================================================================
# Practice Guide
# =============================================================================

# Demo skeleton for the practice guide (one hand, normalized x, y, z)
GUIDE_SKELETON: Final[tuple[tuple[float, float, float], ...]] = (
    (0.5, 0.5, 0.0),  # Wrist
    (0.4, 0.6, -0.1), (0.35, 0.65, -0.15), (0.3, 0.7, -0.2), (0.25, 0.75, -0.25),  # Thumb
    (0.6, 0.4, -0.05), (0.65, 0.3, -0.1), (0.7, 0.2, -0.15), (0.75, 0.1, -0.2),  # Index
    (0.55, 0.45, -0.05), (0.55, 0.35, -0.1), (0.55, 0.25, -0.15), (0.55, 0.15, -0.2),  # Middle
    (0.5, 0.4, -0.05), (0.45, 0.3, -0.1), (0.4, 0.2, -0.15), (0.35, 0.1, -0.2),  # Ring
    (0.45, 0.5, -0.05), (0.4, 0.4, -0.1), (0.35, 0.3, -0.15), (0.3, 0.2, -0.2),  # Pinky
)

# Sign catalog shown by --list-signs (display name, emoji)
SIGN_CATALOG: Final[tuple[tuple[str, str], ...]] = (
    ("Hello", "\U0001F44B"),
    ("Thank You", "\U0001F64F"),
    ("Yes", "\U0001F44D"),
    ("No", "\U0001F44E"),
    ("I Love You", "\U0001F91F"),
    ("Help", "\U0001F198"),
    ("Water", "\U0001F4A7"),
    ("Food", "\U0001F354"),
    ("Good", "✅"),
    ("Bad", "❌"),
    ("More", "➕"),
    ("Please", "\U0001F97A"),
    ("Sorry", "\U0001F614"),
    ("Name", "\U0001F3F7️"),
    ("Home", "\U0001F3E0"),
    ("Friends", "\U0001F91D"),
    ("Learn", "\U0001F4DA"),
)

# =============================================================================
# Speech Output
# =============================================================================
SPEECH_RATE: Final[float] = 1.0
SPEECH_PITCH: Final[float] = 1.0
SPEECH_VOLUME: Final[float] = 1.0
SPEECH_BASE_WPM: Final[int] = 200  # pyttsx3 words-per-minute at rate 1.0
SPEECH_MIN_CONFIDENCE: Final[float] = 60.0  # Announce only above this
SPEECH_MAX_PENDING: Final[int] = 2  # Older queued utterances are dropped beyond this

# =============================================================================
# Overlay
# =============================================================================
HIGH_CONFIDENCE_THRESHOLD: Final[float] = 80.0
LEARNING_CONFIDENCE_THRESHOLD: Final[float] = 50.0
REFRESH_CONFIDENCE_DELTA: Final[float] = 5.0  # Result redraw throttle

# BGR colours
COLOR_TEXT: Final[tuple[int, int, int]] = (255, 255, 255)
COLOR_HIGH: Final[tuple[int, int, int]] = (0, 200, 0)
COLOR_LEARNING: Final[tuple[int, int, int]] = (0, 200, 255)
COLOR_LOW: Final[tuple[int, int, int]] = (0, 0, 255)
COLOR_PHRASE: Final[tuple[int, int, int]] = (255, 200, 0)
COLOR_BONE: Final[tuple[int, int, int]] = (0, 255, 0)
COLOR_JOINT: Final[tuple[int, int, int]] = (0, 0, 255)
COLOR_GUIDE_BONE: Final[tuple[int, int, int]] = (255, 0, 0)

# Logging
LOG_FILENAME: Final[str] = "sign_recognizer.log"
LOG_MAX_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 3

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_PROFILE_ERROR: Final[int] = 1
EXIT_CAMERA_ERROR: Final[int] = 2
EXIT_RUNTIME_ERROR: Final[int] = 3


@dataclass
class ClassifierThresholds:
    """Container for rule-based gesture thresholds."""

    greeting_alignment: float = GREETING_ALIGNMENT_TOLERANCE
    thumb_extension: float = THUMB_EXTENSION_RATIO
    thumb_separation: float = THUMB_SEPARATION_RATIO
    rule_confidence: float = RULE_CONFIDENCE
