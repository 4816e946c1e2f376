"""
User profiles for SignRecognizer.

A user profile carries the accuracy bias used to perturb fallback
confidence. The built-in profiles are recreated identically every
session; extra profiles can be loaded from a JSON file whose entries
use camelCase keys.
"""

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .logger import get_logger

logger = get_logger("UserProfiles")


@dataclass
class UserProfile:
    """
    Per-user simulation settings.

    Attributes:
        user_id: Identifier selected in the UI / CLI.
        display_name: Human readable name.
        accuracy_bias: Confidence penalty in [0, 1].
        model_loaded: Whether the (simulated) model is available.
    """

    user_id: str
    display_name: str
    accuracy_bias: float = 0.0
    model_loaded: bool = True

    def __post_init__(self) -> None:
        self.accuracy_bias = max(0.0, min(1.0, float(self.accuracy_bias)))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        """
        Create UserProfile from dictionary with camelCase keys.

        Args:
            data: Dictionary with id, displayName, accuracyBias, modelLoaded keys.

        Returns:
            UserProfile instance.

        Raises:
            KeyError: If id is missing.
            ValueError: If accuracyBias is not numeric.
        """
        user_id = str(data["id"])
        bias = data.get("accuracyBias", 0.0)
        if isinstance(bias, bool) or not isinstance(bias, (int, float)):
            raise ValueError(f"accuracyBias must be a number, got {bias!r}")
        return cls(
            user_id=user_id,
            display_name=str(data.get("displayName", user_id)),
            accuracy_bias=bias,
            model_loaded=bool(data.get("modelLoaded", True))
        )


DEFAULT_USER_PROFILES: tuple[UserProfile, ...] = (
    UserProfile("default", "Default", 0.0),
    UserProfile("user1", "Alex Johnson", 0.1),
    UserProfile("user2", "Maria Garcia", 0.05),
    UserProfile("user3", "David Chen", 0.15),
)


class ProfileLoadError(Exception):
    """Raised when profile loading or validation fails."""
    pass


def default_profiles() -> dict[str, UserProfile]:
    """Fresh copy of the built-in profiles, keyed by user id."""
    return {p.user_id: replace(p) for p in DEFAULT_USER_PROFILES}


def load_user_profiles(profile_path: str | Path) -> dict[str, UserProfile]:
    """
    Load extra user profiles from a JSON file and merge them over the defaults.

    Expected format::

        {"profiles": [{"id": "user4", "displayName": "Sam", "accuracyBias": 0.2}]}

    Args:
        profile_path: Path to the JSON profile file.

    Returns:
        Profiles keyed by user id.

    Raises:
        ProfileLoadError: If the file cannot be read or is not valid JSON.
    """
    path = Path(profile_path)
    logger.info(f"Loading user profiles from: {path}")

    if not path.exists():
        raise ProfileLoadError(f"Profile file not found: {path}")

    if not path.is_file():
        raise ProfileLoadError(f"Profile path is not a file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProfileLoadError(f"Invalid JSON in profile file: {e}")
    except OSError as e:
        raise ProfileLoadError(f"Cannot read profile file: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("profiles"), list):
        raise ProfileLoadError("Profile file must contain a 'profiles' list")

    profiles = default_profiles()
    loaded = 0
    for entry in data["profiles"]:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping non-object profile entry: {entry!r}")
            continue
        try:
            profile = UserProfile.from_dict(entry)
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping invalid profile entry: {e}")
            continue
        if profile.user_id in profiles:
            logger.debug(f"Overriding profile: {profile.user_id}")
        profiles[profile.user_id] = profile
        loaded += 1

    logger.info(f"Loaded {loaded} user profile(s), {len(profiles)} available")
    return profiles
