"""
MediaPipe model file manager for the Tasks API.

Downloads and caches the hand landmarker model used when the legacy
Solutions API is not available in the installed mediapipe.
"""

import os
import sys
import time
import urllib.request
from pathlib import Path

from .logger import get_logger

logger = get_logger("ModelManager")

HAND_LANDMARKER_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/latest/hand_landmarker.task"
)
HAND_LANDMARKER_FILENAME = "hand_landmarker.task"

DOWNLOAD_TIMEOUT = 120  # seconds
DOWNLOAD_CHUNK_SIZE = 8192  # bytes
MAX_RETRIES = 3
RETRY_DELAY = 2  # seconds


def get_model_cache_dir() -> Path:
    """
    Get the model cache directory.

    Returns:
        Path to model cache directory (creates if needed).
    """
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~"))
    else:
        base = os.environ.get("XDG_CACHE_HOME", os.path.expanduser("~/.cache"))

    cache_dir = Path(base) / "SignRecognizer" / "mediapipe_models"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def ensure_hand_landmarker_model() -> str:
    """
    Return the cached hand landmarker model, downloading it if needed.

    Returns:
        Path to the model file.

    Raises:
        RuntimeError: If download fails after retries.
    """
    model_path = get_model_cache_dir() / HAND_LANDMARKER_FILENAME

    if model_path.exists():
        logger.debug(f"Using cached model: {model_path}")
        return str(model_path)

    logger.info(f"Downloading hand landmarker model from {HAND_LANDMARKER_URL}")

    for attempt in range(1, MAX_RETRIES + 1):
        try:
            _download(HAND_LANDMARKER_URL, model_path)
            logger.info(f"Model downloaded: {model_path}")
            return str(model_path)
        except OSError as e:
            logger.warning(f"Download attempt {attempt}/{MAX_RETRIES} failed: {e}")
            if attempt == MAX_RETRIES:
                raise RuntimeError(
                    f"Failed to download MediaPipe model after {MAX_RETRIES} attempts"
                ) from e
            time.sleep(RETRY_DELAY * attempt)

    raise RuntimeError("Model download failed")


def _download(url: str, dest_path: Path) -> None:
    """Download url to dest_path via a temp file."""
    temp_path = dest_path.with_suffix(".tmp")
    request = urllib.request.Request(url, headers={"User-Agent": "SignRecognizer/1.0"})

    try:
        with urllib.request.urlopen(request, timeout=DOWNLOAD_TIMEOUT) as response, \
                open(temp_path, "wb") as f:
            while True:
                chunk = response.read(DOWNLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                f.write(chunk)
        temp_path.replace(dest_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
