"""Tests for the command line entry point."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from sign_recognizer import app
from sign_recognizer.config import EXIT_CAMERA_ERROR, EXIT_PROFILE_ERROR, EXIT_SUCCESS
from sign_recognizer.camera_manager import CameraError
from sign_recognizer.logger import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_parse_args_defaults():
    args = app.parse_args([])

    assert args.user == "default"
    assert args.camera == -1
    assert args.seed is None
    assert not args.debug
    assert not args.no_speech
    assert not args.swap_hands
    assert args.practice is None


def test_parse_args_options():
    args = app.parse_args(["-u", "user2", "--camera", "1", "--seed", "7", "--swap-hands", "--no-speech"])

    assert args.user == "user2"
    assert args.camera == 1
    assert args.seed == 7
    assert args.swap_hands
    assert args.no_speech


def test_list_signs(capsys):
    assert app.main(["--list-signs"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "Thank You" in out
    assert len(out.strip().splitlines()) == 17


def test_practice_known_sign(capsys):
    assert app.main(["--practice", "thank you"]) == EXIT_SUCCESS
    assert 'Guide for: "thank you"' in capsys.readouterr().out


def test_practice_unknown_sign(capsys):
    assert app.main(["--practice", "goodbye"]) == EXIT_SUCCESS
    assert "not found in our current dataset" in capsys.readouterr().out


def test_missing_profiles_file(tmp_path):
    assert app.main(["--profiles", str(tmp_path / "nope.json")]) == EXIT_PROFILE_ERROR


def test_no_camera(monkeypatch):
    def no_camera(preferred_index=-1):
        raise CameraError("No cameras available")

    monkeypatch.setattr(app, "select_camera", no_camera)
    assert app.main(["--no-speech"]) == EXIT_CAMERA_ERROR


def _file_handlers():
    return [
        h for h in logging.getLogger(LOGGER_NAME).handlers
        if isinstance(h, RotatingFileHandler)
    ]


def test_log_file_option(tmp_path):
    assert app.main(["--log-file", "custom.log", "--practice", "hello"]) == EXIT_SUCCESS

    log_path = tmp_path / "SignRecognizer" / "logs" / "custom.log"
    assert log_path.exists()
    assert [Path(h.baseFilename) for h in _file_handlers()] == [log_path]


def test_log_file_absolute_path(tmp_path):
    target = tmp_path / "elsewhere" / "run.log"
    assert app.main(["--log-file", str(target), "--practice", "hello"]) == EXIT_SUCCESS
    assert target.exists()


def test_no_log_file_option(tmp_path):
    assert app.main(["--no-log-file", "--practice", "hello"]) == EXIT_SUCCESS

    assert _file_handlers() == []
    assert not (tmp_path / "SignRecognizer").exists()


def test_setup_logging_replaces_handlers():
    setup_logging(log_to_file=False)
    logger = setup_logging(log_to_file=False)
    assert len(logger.handlers) == 1
