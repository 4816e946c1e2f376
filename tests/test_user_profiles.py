"""Tests for user profile loading."""

import json

import pytest

from sign_recognizer.user_profiles import (
    ProfileLoadError,
    UserProfile,
    default_profiles,
    load_user_profiles,
)


def _write(tmp_path, data):
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_default_profiles():
    profiles = default_profiles()

    assert list(profiles) == ["default", "user1", "user2", "user3"]
    assert profiles["user1"].display_name == "Alex Johnson"
    assert profiles["user3"].accuracy_bias == pytest.approx(0.15)
    assert profiles["default"].accuracy_bias == 0.0


def test_default_profiles_are_fresh_copies():
    first = default_profiles()
    first["user1"].accuracy_bias = 0.9
    assert default_profiles()["user1"].accuracy_bias == pytest.approx(0.1)


def test_from_dict_camel_case():
    profile = UserProfile.from_dict(
        {"id": "user4", "displayName": "Sam Lee", "accuracyBias": 0.2, "modelLoaded": False}
    )
    assert profile == UserProfile("user4", "Sam Lee", 0.2, False)


def test_from_dict_defaults_and_clamping():
    profile = UserProfile.from_dict({"id": "user5", "accuracyBias": 3})
    assert profile.display_name == "user5"
    assert profile.accuracy_bias == 1.0
    assert profile.model_loaded


@pytest.mark.parametrize("data, error", [
    ({"displayName": "No id"}, KeyError),
    ({"id": "x", "accuracyBias": "high"}, ValueError),
    ({"id": "x", "accuracyBias": True}, ValueError),
])
def test_from_dict_rejects_bad_entries(data, error):
    with pytest.raises(error):
        UserProfile.from_dict(data)


def test_load_merges_over_defaults(tmp_path):
    path = _write(tmp_path, {"profiles": [
        {"id": "user4", "displayName": "Sam Lee", "accuracyBias": 0.2},
        {"id": "user1", "displayName": "Alex J.", "accuracyBias": 0.0},
    ]})

    profiles = load_user_profiles(path)

    assert profiles["user4"].accuracy_bias == pytest.approx(0.2)
    assert profiles["user1"].display_name == "Alex J."
    assert profiles["user1"].accuracy_bias == 0.0
    assert "user2" in profiles


def test_load_skips_invalid_entries(tmp_path):
    path = _write(tmp_path, {"profiles": [
        "not an object",
        {"displayName": "missing id"},
        {"id": "user6", "accuracyBias": "bad"},
        {"id": "user7"},
    ]})

    profiles = load_user_profiles(str(path))

    assert "user7" in profiles
    assert "user6" not in profiles
    assert len(profiles) == 5


def test_load_missing_file(tmp_path):
    with pytest.raises(ProfileLoadError, match="not found"):
        load_user_profiles(tmp_path / "missing.json")


def test_load_directory(tmp_path):
    with pytest.raises(ProfileLoadError, match="not a file"):
        load_user_profiles(tmp_path)


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ProfileLoadError, match="Invalid JSON"):
        load_user_profiles(path)


@pytest.mark.parametrize("data", [[], {"users": []}, {"profiles": {"id": "x"}}])
def test_load_requires_profiles_list(tmp_path, data):
    with pytest.raises(ProfileLoadError, match="'profiles' list"):
        load_user_profiles(_write(tmp_path, data))
