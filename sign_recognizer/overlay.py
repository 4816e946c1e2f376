"""
On-frame rendering for SignRecognizer.

Draws the current prediction, session stats, live hand skeletons and
the practice-guide skeleton onto OpenCV BGR images.
"""

from typing import Optional, Sequence

import cv2
import numpy as np

from .config import (
    ALTERNATIVES_CONFIDENCE_THRESHOLD,
    COLOR_BONE,
    COLOR_GUIDE_BONE,
    COLOR_HIGH,
    COLOR_JOINT,
    COLOR_LEARNING,
    COLOR_LOW,
    COLOR_PHRASE,
    COLOR_TEXT,
    HIGH_CONFIDENCE_THRESHOLD,
    LEARNING_CONFIDENCE_THRESHOLD,
    REFRESH_CONFIDENCE_DELTA,
)
from .landmarks import HAND_CONNECTIONS, HandFrame
from .session import SessionStats
from .sign_classifier import Prediction

FONT = cv2.FONT_HERSHEY_SIMPLEX
LINE_HEIGHT = 26


def confidence_tier(confidence: float) -> str:
    """Human label for a confidence value."""
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        return "High Confidence"
    if confidence >= LEARNING_CONFIDENCE_THRESHOLD:
        return "AI Learning"
    return "Needs Clarity"


def _tier_color(confidence: float) -> tuple[int, int, int]:
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        return COLOR_HIGH
    if confidence >= LEARNING_CONFIDENCE_THRESHOLD:
        return COLOR_LEARNING
    return COLOR_LOW


def should_refresh(
    previous_sign: Optional[str],
    previous_confidence: float,
    prediction: Prediction
) -> bool:
    """
    Decide whether the result panel needs redrawing.

    Same label, confidence within the refresh delta and no phrase
    completion means the displayed result is still current.
    """
    if prediction.phrase_completion:
        return True
    if prediction.sign != previous_sign:
        return True
    return abs(prediction.confidence - previous_confidence) >= REFRESH_CONFIDENCE_DELTA


def format_result_lines(prediction: Prediction) -> list[str]:
    """
    Text lines for the result panel.

    Args:
        prediction: Prediction to describe.

    Returns:
        Label, confidence line, then optional alternatives and phrase lines.
    """
    lines = [
        prediction.display_text,
        f"Confidence: {prediction.confidence:.1f}% ({confidence_tier(prediction.confidence)})",
    ]
    if prediction.alternatives and prediction.confidence < ALTERNATIVES_CONFIDENCE_THRESHOLD:
        names = ", ".join(alt.replace("_", " ") for alt in prediction.alternatives)
        lines.append(f"Did you mean: {names}")
    if prediction.phrase_completion:
        lines.append(f'"{prediction.phrase_completion}" detected!')
    return lines


def format_stats_lines(stats: SessionStats, now: Optional[float] = None) -> list[str]:
    """Text lines for the session stats panel."""
    return [
        f"Signs: {stats.signs_detected}",
        f"Avg confidence: {stats.average_confidence:.0f}%",
        f"Phrases: {stats.phrases_completed}",
        f"Time: {stats.format_elapsed(now)}",
    ]


def _put_lines(
    frame: np.ndarray,
    lines: Sequence[str],
    origin: tuple[int, int],
    colors: Sequence[tuple[int, int, int]],
    scale: float = 0.6
) -> None:
    x, y = origin
    for i, line in enumerate(lines):
        color = colors[i] if i < len(colors) else COLOR_TEXT
        cv2.putText(frame, line, (x, y + i * LINE_HEIGHT), FONT, scale, color, 2, cv2.LINE_AA)


def draw_result(frame: np.ndarray, prediction: Prediction) -> np.ndarray:
    """Draw the prediction panel in the top-left corner."""
    lines = format_result_lines(prediction)
    colors = [COLOR_TEXT, _tier_color(prediction.confidence)] + [COLOR_TEXT] * (len(lines) - 2)
    if prediction.phrase_completion:
        colors[-1] = COLOR_PHRASE
    _put_lines(frame, lines, (10, 30), colors)
    return frame


def draw_stats(frame: np.ndarray, stats: SessionStats, now: Optional[float] = None) -> np.ndarray:
    """Draw session stats in the bottom-left corner."""
    lines = format_stats_lines(stats, now)
    h = frame.shape[0]
    top = h - 10 - (len(lines) - 1) * LINE_HEIGHT
    _put_lines(frame, lines, (10, top), [COLOR_TEXT] * len(lines), scale=0.5)
    return frame


def _draw_points(
    image: np.ndarray,
    points: Sequence[tuple[float, float]],
    bone_color: tuple[int, int, int],
    joint_color: tuple[int, int, int]
) -> np.ndarray:
    h, w = image.shape[:2]
    pixels = [(int(x * w), int(y * h)) for x, y in points]

    for start_idx, end_idx in HAND_CONNECTIONS:
        if start_idx < len(pixels) and end_idx < len(pixels):
            cv2.line(image, pixels[start_idx], pixels[end_idx], bone_color, 2)

    for pt in pixels:
        cv2.circle(image, pt, 5, joint_color, -1)

    return image


def draw_hand(image: np.ndarray, hand: HandFrame) -> np.ndarray:
    """Draw a live hand skeleton."""
    return _draw_points(image, [(lm.x, lm.y) for lm in hand.landmarks], COLOR_BONE, COLOR_JOINT)


def draw_skeleton(image: np.ndarray, skeleton: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Draw a practice-guide skeleton.

    Args:
        image: BGR image to draw on.
        skeleton: Normalized (x, y[, z]) points; empty draws nothing.

    Returns:
        The same image.
    """
    if not skeleton:
        return image
    return _draw_points(image, [(p[0], p[1]) for p in skeleton], COLOR_GUIDE_BONE, COLOR_JOINT)


def render_guide(skeleton: Sequence[Sequence[float]], width: int = 640, height: int = 480) -> np.ndarray:
    """Blank canvas with the guide skeleton, mirrored like the camera view."""
    canvas = np.full((height, width, 3), 255, dtype=np.uint8)
    draw_skeleton(canvas, skeleton)
    return cv2.flip(canvas, 1)
