"""
SignRecognizer - webcam sign recognition using MediaPipe Hands.

Classifies hand landmarks into a small sign vocabulary, announces
results with text-to-speech and tracks per-session statistics.
"""

__version__ = "1.0.0"
__author__ = "SignRecognizer Team"

from .landmarks import HandFrame, Landmark, LandmarkIndex, hand_frame_from_points
from .gesture_rules import GestureRule, DEFAULT_RULES, match_rules
from .user_profiles import UserProfile, ProfileLoadError, load_user_profiles, default_profiles
from .sign_classifier import SignClassifier, Prediction, SignGuide
from .session import SessionState, SessionStats

__all__ = [
    "HandFrame",
    "Landmark",
    "LandmarkIndex",
    "hand_frame_from_points",
    "GestureRule",
    "DEFAULT_RULES",
    "match_rules",
    "UserProfile",
    "ProfileLoadError",
    "load_user_profiles",
    "default_profiles",
    "SignClassifier",
    "Prediction",
    "SignGuide",
    "SessionState",
    "SessionStats",
]
