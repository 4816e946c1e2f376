"""Tests for the webcam wrapper using a fake capture device."""

import numpy as np
import pytest

from sign_recognizer import camera_manager
from sign_recognizer.camera_manager import CameraError, CameraManager, select_camera


class FakeCapture:
    def __init__(self, opened=True, frames=None):
        self.opened = opened
        self.frames = list(frames or [])
        self.released = False
        self.props = {}

    def isOpened(self):
        return self.opened and not self.released

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def get(self, prop):
        return self.props.get(prop, 0)

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


def _frame():
    frame = np.zeros((2, 3, 3), dtype=np.uint8)
    frame[:, 0] = 255  # Left column white
    return frame


def test_read_mirrors_frames(monkeypatch):
    monkeypatch.setattr(camera_manager, "_open_capture", lambda index: FakeCapture(frames=[_frame()]))

    with CameraManager(camera_index=0) as camera:
        assert camera.is_open
        frame = camera.read()
        assert frame[:, 2].all()
        assert not frame[:, 0].any()
        assert camera.frame_count == 1
        assert camera.read() is None

    assert not camera.is_open


def test_read_without_mirror(monkeypatch):
    monkeypatch.setattr(camera_manager, "_open_capture", lambda index: FakeCapture(frames=[_frame()]))

    camera = CameraManager(mirror=False)
    camera.open()
    assert camera.read()[:, 0].all()
    camera.close()


def test_open_failure(monkeypatch):
    monkeypatch.setattr(camera_manager, "_open_capture", lambda index: FakeCapture(opened=False))

    with pytest.raises(CameraError):
        CameraManager(camera_index=3).open()


def test_read_requires_open():
    with pytest.raises(CameraError):
        CameraManager().read()


def test_select_camera(monkeypatch):
    monkeypatch.setattr(camera_manager, "_open_capture", lambda index: FakeCapture(opened=index in (1, 2)))

    assert select_camera() == 1
    assert select_camera(2) == 2
    assert select_camera(4) == 1


def test_select_camera_none_available(monkeypatch):
    monkeypatch.setattr(camera_manager, "_open_capture", lambda index: FakeCapture(opened=False))

    with pytest.raises(CameraError):
        select_camera()
