"""
Hand frame data model.

A hand frame is the 21 normalized landmarks MediaPipe reports for one hand.
Frames are produced once per video frame and consumed immediately by the
classifier; anything that is not a complete 21-point hand becomes None.
"""

from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional, Sequence

import numpy as np

from .config import HAND_LANDMARK_COUNT


# MediaPipe landmark indices
class LandmarkIndex:
    """MediaPipe hand landmark indices."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# Non-thumb fingers as (tip, knuckle) pairs
FINGER_TIP_MCP_PAIRS: tuple[tuple[int, int], ...] = (
    (LandmarkIndex.INDEX_TIP, LandmarkIndex.INDEX_MCP),
    (LandmarkIndex.MIDDLE_TIP, LandmarkIndex.MIDDLE_MCP),
    (LandmarkIndex.RING_TIP, LandmarkIndex.RING_MCP),
    (LandmarkIndex.PINKY_TIP, LandmarkIndex.PINKY_MCP),
)

# Bones drawn for a hand skeleton
HAND_CONNECTIONS: tuple[tuple[int, int], ...] = (
    (0, 1), (1, 2), (2, 3), (3, 4),  # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),  # Index
    (9, 10), (10, 11), (11, 12),  # Middle
    (13, 14), (14, 15), (15, 16),  # Ring
    (17, 18), (18, 19), (19, 20),  # Pinky
    (0, 9), (9, 13), (13, 17), (0, 17),  # Palm
)


@dataclass(frozen=True)
class Landmark:
    """Single hand landmark with normalized 3D coordinates."""
    x: float  # Normalized x [0, 1]
    y: float  # Normalized y [0, 1]
    z: float  # Relative depth


@dataclass(frozen=True)
class HandFrame:
    """
    Complete landmark set for one hand in one video frame.

    Attributes:
        landmarks: Exactly 21 hand landmarks.
        handedness: 'Left', 'Right' or None when unknown.
    """
    landmarks: tuple[Landmark, ...]
    handedness: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.landmarks) != HAND_LANDMARK_COUNT:
            raise ValueError(
                f"HandFrame needs {HAND_LANDMARK_COUNT} landmarks, got {len(self.landmarks)}"
            )

    def __getitem__(self, index: int) -> Landmark:
        return self.landmarks[index]

    @property
    def wrist(self) -> Landmark:
        return self.landmarks[LandmarkIndex.WRIST]

    @property
    def thumb_tip(self) -> Landmark:
        return self.landmarks[LandmarkIndex.THUMB_TIP]

    @property
    def thumb_mcp(self) -> Landmark:
        return self.landmarks[LandmarkIndex.THUMB_MCP]

    @property
    def index_mcp(self) -> Landmark:
        return self.landmarks[LandmarkIndex.INDEX_MCP]

    def get_fingertips(self) -> list[Landmark]:
        """Get all five fingertip landmarks, thumb first."""
        return [
            self.landmarks[LandmarkIndex.THUMB_TIP],
            self.landmarks[LandmarkIndex.INDEX_TIP],
            self.landmarks[LandmarkIndex.MIDDLE_TIP],
            self.landmarks[LandmarkIndex.RING_TIP],
            self.landmarks[LandmarkIndex.PINKY_TIP],
        ]

    def distance(self, a: int, b: int) -> float:
        """Euclidean distance between two landmarks, by index."""
        p = self.landmarks[a]
        q = self.landmarks[b]
        return float(np.linalg.norm([p.x - q.x, p.y - q.y, p.z - q.z]))

    def to_array(self) -> np.ndarray:
        """Landmarks as a (21, 3) float array."""
        return np.array([(lm.x, lm.y, lm.z) for lm in self.landmarks], dtype=np.float64)


def _coerce_landmark(point: Any) -> Optional[Landmark]:
    """Convert a tuple/list or an object with .x/.y/.z into a Landmark."""
    if point is None:
        return None

    if hasattr(point, "x") and hasattr(point, "y"):
        coords = (point.x, point.y, getattr(point, "z", 0.0))
    elif isinstance(point, (list, tuple, np.ndarray)) and len(point) >= 3:
        coords = (point[0], point[1], point[2])
    else:
        return None

    if not all(isinstance(c, (Real, np.floating)) and not isinstance(c, bool) for c in coords):
        return None

    return Landmark(x=float(coords[0]), y=float(coords[1]), z=float(coords[2]))


def hand_frame_from_points(
    points: Any,
    handedness: Optional[str] = None
) -> Optional[HandFrame]:
    """
    Build a HandFrame from raw landmark data.

    Accepts a HandFrame, a sequence of (x, y, z) points, a sequence of
    objects exposing .x/.y/.z, or a MediaPipe landmark list (.landmark).

    Args:
        points: Raw landmark data for one hand.
        handedness: Optional 'Left'/'Right' label.

    Returns:
        HandFrame, or None if the data is absent or incomplete.
    """
    if points is None:
        return None

    if isinstance(points, HandFrame):
        return points

    # MediaPipe NormalizedLandmarkList
    if hasattr(points, "landmark"):
        points = points.landmark

    if not isinstance(points, (Sequence, np.ndarray)) and not hasattr(points, "__len__"):
        return None

    if len(points) < HAND_LANDMARK_COUNT:
        return None

    landmarks = []
    for point in list(points)[:HAND_LANDMARK_COUNT]:
        landmark = _coerce_landmark(point)
        if landmark is None:
            return None
        landmarks.append(landmark)

    return HandFrame(landmarks=tuple(landmarks), handedness=handedness)
