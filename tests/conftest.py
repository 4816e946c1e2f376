"""Shared hand-landmark fixtures for SignRecognizer tests."""

import random

import pytest


def _hand(wrist, thumb, index, middle, ring, pinky):
    """Assemble 21 (x, y, z) points from per-finger 2D joint lists."""
    points = [wrist] + thumb + index + middle + ring + pinky
    assert len(points) == 21
    return [(x, y, 0.0) for x, y in points]


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def hello_points():
    """Raised open palm: level fingertips above the wrist, straight thumb."""
    return _hand(
        (0.5, 0.5),
        [(0.4, 0.45), (0.33, 0.40), (0.27, 0.35), (0.21, 0.30)],
        [(0.45, 0.35), (0.45, 0.30), (0.45, 0.25), (0.45, 0.20)],
        [(0.5, 0.35), (0.5, 0.30), (0.5, 0.25), (0.5, 0.21)],
        [(0.55, 0.36), (0.55, 0.31), (0.55, 0.26), (0.55, 0.22)],
        [(0.6, 0.38), (0.6, 0.33), (0.6, 0.26), (0.6, 0.19)],
    )


@pytest.fixture
def yes_points():
    """Thumbs up: fist below the wrist line, thumb pointing up."""
    return _hand(
        (0.5, 0.6),
        [(0.42, 0.55), (0.38, 0.45), (0.37, 0.35), (0.37, 0.25)],
        [(0.45, 0.45), (0.47, 0.52), (0.47, 0.58), (0.46, 0.62)],
        [(0.5, 0.46), (0.52, 0.53), (0.52, 0.58), (0.5, 0.62)],
        [(0.55, 0.47), (0.56, 0.54), (0.56, 0.58), (0.54, 0.62)],
        [(0.6, 0.48), (0.6, 0.55), (0.6, 0.58), (0.58, 0.62)],
    )


@pytest.fixture
def no_points():
    """Thumbs down: fist with the thumb pointing below the wrist."""
    return _hand(
        (0.5, 0.4),
        [(0.42, 0.45), (0.38, 0.55), (0.37, 0.65), (0.37, 0.75)],
        [(0.45, 0.55), (0.45, 0.60), (0.45, 0.62), (0.45, 0.62)],
        [(0.5, 0.55), (0.5, 0.60), (0.5, 0.62), (0.5, 0.62)],
        [(0.55, 0.55), (0.55, 0.60), (0.55, 0.62), (0.55, 0.62)],
        [(0.6, 0.55), (0.6, 0.60), (0.6, 0.62), (0.6, 0.62)],
    )


@pytest.fixture
def open_points():
    """Open hand with uneven fingertips; matches no rule."""
    return _hand(
        (0.5, 0.6),
        [(0.42, 0.55), (0.36, 0.50), (0.32, 0.45), (0.30, 0.42)],
        [(0.45, 0.45), (0.45, 0.35), (0.45, 0.27), (0.45, 0.20)],
        [(0.5, 0.44), (0.5, 0.33), (0.5, 0.24), (0.5, 0.15)],
        [(0.55, 0.45), (0.55, 0.40), (0.55, 0.35), (0.55, 0.30)],
        [(0.6, 0.47), (0.6, 0.45), (0.6, 0.42), (0.6, 0.40)],
    )


@pytest.fixture
def bent_thumb_points(hello_points):
    """The greeting pose with a zig-zag thumb."""
    points = list(hello_points)
    points[1:5] = [(0.4, 0.45, 0.0), (0.33, 0.40, 0.0), (0.40, 0.35, 0.0), (0.33, 0.30, 0.0)]
    return points


@pytest.fixture
def fixed_random():
    """Factory for a random source with a pinned random() value."""
    return FixedRandom
