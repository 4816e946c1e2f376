"""
Hand detector using MediaPipe Hands.

Finds up to two hands per RGB frame and reports them as left/right
HandFrames for the sign classifier. Supports both the Solutions API
and the Tasks API, whichever the installed mediapipe provides.
"""

from dataclasses import dataclass
from typing import Any, Optional

import mediapipe as mp
import numpy as np

from .config import (
    MEDIAPIPE_MAX_NUM_HANDS,
    MEDIAPIPE_MIN_DETECTION_CONFIDENCE,
    MEDIAPIPE_MIN_TRACKING_CONFIDENCE,
    MEDIAPIPE_MODEL_COMPLEXITY,
    SWAP_HANDEDNESS,
)
from .landmarks import HandFrame, hand_frame_from_points
from .logger import get_logger

logger = get_logger("HandDetector")

# Newer mediapipe wheels ship only the Tasks API
USING_TASKS_API = not (hasattr(mp, "solutions") and hasattr(mp.solutions, "hands"))


@dataclass
class DetectedHands:
    """Per-frame detector output; either side may be missing."""
    left: Optional[HandFrame] = None
    right: Optional[HandFrame] = None

    @property
    def any(self) -> bool:
        return self.left is not None or self.right is not None

    def hands(self) -> list[HandFrame]:
        return [h for h in (self.left, self.right) if h is not None]


class HandDetector:
    """
    MediaPipe hand landmark detector.

    MediaPipe labels handedness as if the input were a mirrored selfie.
    Whether "Left" means the signer's left hand therefore depends on
    whether the camera feed was flipped first. swap_handedness exchanges
    the two sides and is logged at startup so the active mapping is
    always visible.
    """

    def __init__(
        self,
        model_complexity: int = MEDIAPIPE_MODEL_COMPLEXITY,
        max_num_hands: int = MEDIAPIPE_MAX_NUM_HANDS,
        min_detection_confidence: float = MEDIAPIPE_MIN_DETECTION_CONFIDENCE,
        min_tracking_confidence: float = MEDIAPIPE_MIN_TRACKING_CONFIDENCE,
        swap_handedness: bool = SWAP_HANDEDNESS
    ):
        """
        Initialize hand detector.

        Args:
            model_complexity: Model complexity (0=Lite, 1=Full).
            max_num_hands: Maximum number of hands to detect.
            min_detection_confidence: Minimum detection confidence.
            min_tracking_confidence: Minimum tracking confidence.
            swap_handedness: Exchange MediaPipe's Left/Right labels.
        """
        self.model_complexity = model_complexity
        self.max_num_hands = max_num_hands
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self.swap_handedness = swap_handedness

        self._hands = None  # Solutions API Hands object
        self._landmarker = None  # Tasks API HandLandmarker object
        self._timestamp_ms = 0
        self._is_initialized = False

        api_type = "Tasks API" if USING_TASKS_API else "Solutions API"
        mapping = "swapped" if swap_handedness else "as reported"
        logger.info(
            f"HandDetector initialized ({api_type}, max_hands={max_num_hands}, "
            f"handedness {mapping})"
        )

    def initialize(self) -> None:
        """Create the MediaPipe model."""
        if self._is_initialized:
            return

        if USING_TASKS_API:
            from mediapipe.tasks import python as mp_python
            from mediapipe.tasks.python import vision as mp_vision

            from .model_manager import ensure_hand_landmarker_model

            options = mp_vision.HandLandmarkerOptions(
                base_options=mp_python.BaseOptions(model_asset_path=ensure_hand_landmarker_model()),
                running_mode=mp_vision.RunningMode.VIDEO,
                num_hands=self.max_num_hands,
                min_hand_detection_confidence=self.min_detection_confidence,
                min_hand_presence_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence
            )
            self._landmarker = mp_vision.HandLandmarker.create_from_options(options)
            self._timestamp_ms = 0
        else:
            self._hands = mp.solutions.hands.Hands(
                static_image_mode=False,
                model_complexity=self.model_complexity,
                max_num_hands=self.max_num_hands,
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence
            )

        self._is_initialized = True
        logger.info("MediaPipe Hands ready")

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self._hands:
            self._hands.close()
            self._hands = None
        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None
        self._is_initialized = False
        logger.debug("HandDetector closed")

    def detect(self, rgb_image: np.ndarray) -> DetectedHands:
        """
        Detect hands in an RGB image.

        Args:
            rgb_image: RGB image as numpy array (H, W, 3).

        Returns:
            DetectedHands with left/right frames where found.
        """
        if not self._is_initialized:
            self.initialize()

        if USING_TASKS_API:
            pairs = self._detect_tasks_api(rgb_image)
        else:
            pairs = self._detect_solutions_api(rgb_image)

        return self._assign_sides(pairs)

    def _detect_solutions_api(self, rgb_image: np.ndarray) -> list[tuple[str, Any]]:
        results = self._hands.process(rgb_image)
        if not results.multi_hand_landmarks:
            return []

        pairs = []
        for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
            label = "Right"
            if results.multi_handedness and i < len(results.multi_handedness):
                label = results.multi_handedness[i].classification[0].label
            pairs.append((label, hand_landmarks))
        return pairs

    def _detect_tasks_api(self, rgb_image: np.ndarray) -> list[tuple[str, Any]]:
        if not rgb_image.flags["C_CONTIGUOUS"]:
            rgb_image = np.ascontiguousarray(rgb_image)

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)
        self._timestamp_ms += 33  # ~30 FPS
        result = self._landmarker.detect_for_video(mp_image, self._timestamp_ms)
        if not result.hand_landmarks:
            return []

        pairs = []
        for i, hand_landmarks in enumerate(result.hand_landmarks):
            label = "Right"
            if result.handedness and i < len(result.handedness):
                label = result.handedness[i][0].category_name
            pairs.append((label, hand_landmarks))
        return pairs

    def _assign_sides(self, pairs: list[tuple[str, Any]]) -> DetectedHands:
        """Map labelled landmark sets onto left/right, first one per side wins."""
        detected = DetectedHands()
        for label, raw in pairs:
            side = label
            if self.swap_handedness:
                side = "Left" if label == "Right" else "Right"

            frame = hand_frame_from_points(raw, side)
            if frame is None:
                continue
            if side == "Left" and detected.left is None:
                detected.left = frame
            elif side == "Right" and detected.right is None:
                detected.right = frame
        return detected
