"""
Webcam capture for SignRecognizer.

Thin OpenCV VideoCapture wrapper that yields BGR frames, optionally
mirrored so the preview behaves like a selfie view.
"""

import sys
from typing import Optional

import cv2
import numpy as np

from .config import CAMERA_FPS, CAMERA_HEIGHT, CAMERA_PROBE_LIMIT, CAMERA_WIDTH, DEFAULT_CAMERA_INDEX
from .logger import get_logger

logger = get_logger("CameraManager")


class CameraError(Exception):
    """Raised when camera operations fail."""
    pass


def _open_capture(index: int) -> cv2.VideoCapture:
    """Open a capture device, preferring DirectShow on Windows."""
    if sys.platform == "win32":
        capture = cv2.VideoCapture(index, cv2.CAP_DSHOW)
        if capture.isOpened():
            return capture
        capture.release()
        logger.debug("DirectShow failed, trying default backend")
    return cv2.VideoCapture(index)


class CameraManager:
    """
    Webcam capture session.

    Attributes:
        camera_index: Index of the camera device.
        width: Requested capture width in pixels.
        height: Requested capture height in pixels.
        fps: Requested frames per second.
        mirror: Flip frames horizontally after capture.
    """

    def __init__(
        self,
        camera_index: int = DEFAULT_CAMERA_INDEX,
        width: int = CAMERA_WIDTH,
        height: int = CAMERA_HEIGHT,
        fps: int = CAMERA_FPS,
        mirror: bool = True
    ):
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.fps = fps
        self.mirror = mirror

        self._capture: Optional[cv2.VideoCapture] = None
        self._frame_count = 0

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    @property
    def frame_count(self) -> int:
        """Frames read since opening."""
        return self._frame_count

    def open(self) -> None:
        """
        Open the camera for capture.

        Raises:
            CameraError: If camera cannot be opened.
        """
        if self._capture is not None:
            logger.warning("Camera already open, closing first")
            self.close()

        logger.info(f"Opening camera {self.camera_index}...")
        capture = _open_capture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Failed to open camera {self.camera_index}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        capture.set(cv2.CAP_PROP_FPS, self.fps)
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)  # Always process the newest frame

        actual_w = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info(f"Camera opened: {actual_w}x{actual_h} @ {capture.get(cv2.CAP_PROP_FPS):.1f} FPS")
        if (actual_w, actual_h) != (self.width, self.height):
            logger.warning(f"Requested {self.width}x{self.height}, got {actual_w}x{actual_h}")

        self._capture = capture
        self._frame_count = 0

    def close(self) -> None:
        """Close the camera and release resources."""
        if self._capture is not None:
            logger.info("Closing camera")
            self._capture.release()
            self._capture = None

    def read(self) -> Optional[np.ndarray]:
        """
        Read a single BGR frame.

        Returns:
            Frame, or None if the read failed.

        Raises:
            CameraError: If camera is not open.
        """
        if self._capture is None:
            raise CameraError("Camera is not open")

        ok, frame = self._capture.read()
        if not ok or frame is None:
            logger.warning("Failed to read frame from camera")
            return None

        self._frame_count += 1
        if self.mirror:
            frame = cv2.flip(frame, 1)
        return frame

    def __enter__(self) -> "CameraManager":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def list_cameras(max_index: int = CAMERA_PROBE_LIMIT) -> list[int]:
    """
    Enumerate camera indices that can be opened.

    Args:
        max_index: Number of indices to probe.

    Returns:
        Available camera indices.
    """
    available = []
    for i in range(max_index):
        capture = _open_capture(i)
        if capture.isOpened():
            available.append(i)
        capture.release()

    logger.debug(f"Available cameras: {available}")
    return available


def select_camera(preferred_index: int = -1) -> int:
    """
    Select a camera, honouring a preferred index when it works.

    Args:
        preferred_index: Preferred camera index (-1 for auto).

    Returns:
        Selected camera index.

    Raises:
        CameraError: If no camera is available.
    """
    available = list_cameras()
    if not available:
        raise CameraError("No cameras available")

    if preferred_index >= 0:
        if preferred_index in available:
            return preferred_index
        logger.warning(f"Preferred camera {preferred_index} not available, using {available[0]}")

    logger.info(f"Auto-selected camera index: {available[0]}")
    return available[0]
