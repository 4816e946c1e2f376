"""
Sign classifier for SignRecognizer.

Turns one video frame's left/right hand landmarks into a Prediction.
A small set of geometric rules recognises "hello", "yes" and "no";
anything else falls back to a simulated, bias-adjusted random guess so
the UI behaves like an adaptive model would. All randomness comes from
an injectable random.Random so sessions can be replayed with a seed.
"""

import random
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .config import (
    ALTERNATIVES_CONFIDENCE_THRESHOLD,
    ClassifierThresholds,
    CONFIDENCE_DECIMALS,
    FALLBACK_CONFIDENCE_MAX,
    FALLBACK_CONFIDENCE_MIN,
    GUIDE_SKELETON,
    IDLE_LABEL,
    KNOWN_SIGNS,
    MAX_ALTERNATIVES,
    NO_HAND_LABEL,
    PHRASE_COMPLETIONS,
)
from .gesture_rules import GestureRule, build_rules, match_rules
from .landmarks import HandFrame, hand_frame_from_points
from .logger import get_logger
from .user_profiles import UserProfile, default_profiles

logger = get_logger("SignClassifier")

SENTINEL_LABELS = frozenset({NO_HAND_LABEL.lower(), IDLE_LABEL.lower()})


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value to [0, 100]."""
    return max(0.0, min(100.0, float(value)))


@dataclass
class Prediction:
    """
    Result of classifying one frame.

    Attributes:
        sign: Predicted label (vocabulary entry or NO_HAND_LABEL).
        confidence: Confidence in [0, 100].
        alternatives: Up to three other labels, never including sign.
        phrase_completion: Optional canned phrase for the sign.
        source: "rule", "fallback" or "none".
    """
    sign: str
    confidence: float
    alternatives: list[str] = field(default_factory=list)
    phrase_completion: Optional[str] = None
    source: str = "fallback"

    def __post_init__(self) -> None:
        self.confidence = clamp_confidence(self.confidence)

    @property
    def is_hand_detected(self) -> bool:
        return self.sign.lower() not in SENTINEL_LABELS

    @property
    def display_text(self) -> str:
        """Label with underscores shown as spaces."""
        return self.sign.replace("_", " ")

    @property
    def spoken_text(self) -> str:
        """Text to announce: the phrase completion if any, else the label."""
        return self.phrase_completion or self.display_text

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-friendly dict."""
        return {
            "sign": self.sign,
            "confidence": self.confidence,
            "alternatives": list(self.alternatives),
            "phrase_completion": self.phrase_completion,
            "source": self.source,
        }


@dataclass
class SignGuide:
    """
    Practice guide lookup result.

    A failed lookup is a normal result carrying a user-facing message,
    not an error.
    """
    success: bool
    sign: str
    description: str = ""
    message: str = ""
    skeleton_data: list[tuple[float, float, float]] = field(default_factory=list)


def normalize_sign_text(text: str) -> str:
    """'Thank  You ' -> 'thank_you'."""
    return re.sub(r"\s+", "_", text.strip().lower())


class SignClassifier:
    """
    Landmark-to-label classifier.

    Usage:
        classifier = SignClassifier(seed=42)
        prediction = classifier.predict("user1", left_points, right_points)
    """

    def __init__(
        self,
        profiles: Optional[dict[str, UserProfile]] = None,
        rules: Optional[Sequence[GestureRule]] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        known_signs: Sequence[str] = KNOWN_SIGNS,
        thresholds: Optional[ClassifierThresholds] = None
    ):
        """
        Initialize classifier.

        Args:
            profiles: User profiles keyed by id (default: built-in profiles).
            rules: Ordered gesture rules, first match wins (default: built from thresholds).
            rng: Random source for the fallback and phrase completion.
            seed: Seed for a private random source (ignored when rng is given).
            known_signs: Closed vocabulary for the fallback path.
            thresholds: Rule tolerances and confidence (ignored when rules are given).
        """
        self.profiles = profiles if profiles is not None else default_profiles()
        self.thresholds = thresholds if thresholds is not None else ClassifierThresholds()
        self.rules = tuple(rules) if rules is not None else build_rules(self.thresholds)
        self.rng = rng if rng is not None else random.Random(seed)
        self.known_signs = tuple(known_signs)
        self._warned_users: set[str] = set()

        logger.info(
            f"SignClassifier initialized ({len(self.known_signs)} signs, "
            f"{len(self.rules)} rules, {len(self.profiles)} profiles)"
        )

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def load_user_profile(self, user_id: str) -> bool:
        """
        Check that a profile exists for the user.

        Returns:
            True if the profile is known, False if defaults will be used.
        """
        if user_id in self.profiles:
            logger.debug(f"Loaded profile for user: {user_id}")
            return True
        logger.warning(f"Profile {user_id} not found. Using default behavior.")
        return False

    def user_bias(self, user_id: str) -> float:
        """Accuracy bias for a user; unknown users get 0.0."""
        profile = self.profiles.get(user_id)
        if profile is None:
            # Warn once per user; this runs every frame
            if user_id not in self._warned_users:
                logger.warning(f"Unknown user '{user_id}', using zero bias")
                self._warned_users.add(user_id)
            return 0.0
        return profile.accuracy_bias

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    @staticmethod
    def select_hand(left_hand: Any = None, right_hand: Any = None) -> Optional[HandFrame]:
        """
        Pick the hand to classify: right if valid, else left.

        Args:
            left_hand: Raw landmarks reported as the left hand.
            right_hand: Raw landmarks reported as the right hand.

        Returns:
            The active HandFrame or None.
        """
        right = hand_frame_from_points(right_hand, "Right")
        if right is not None:
            return right
        return hand_frame_from_points(left_hand, "Left")

    def predict(self, user_id: str, left_hand: Any = None, right_hand: Any = None) -> Prediction:
        """
        Classify one frame.

        Args:
            user_id: Current user identifier.
            left_hand: Left-hand landmarks (21 points) or None.
            right_hand: Right-hand landmarks (21 points) or None.

        Returns:
            Prediction for the frame. Never raises on bad landmark data.
        """
        hand = self.select_hand(left_hand, right_hand)
        if hand is None:
            return Prediction(NO_HAND_LABEL, 0.0, [], None, source="none")

        rule = match_rules(hand, self.rules)
        if rule is not None:
            prediction = Prediction(rule.label, rule.confidence, [], None, source="rule")
        else:
            prediction = self._fallback_prediction(user_id)

        prediction.phrase_completion = self._complete_phrase(prediction.sign)
        return prediction

    def _fallback_prediction(self, user_id: str) -> Prediction:
        """Random label with bias-adjusted confidence and alternatives."""
        bias = self.user_bias(user_id)

        sign = self.rng.choice(self.known_signs)
        span = FALLBACK_CONFIDENCE_MAX - FALLBACK_CONFIDENCE_MIN
        confidence = FALLBACK_CONFIDENCE_MIN + self.rng.random() * span
        confidence = max(0.0, confidence - bias * 100.0)
        confidence = round(confidence, CONFIDENCE_DECIMALS)

        alternatives: list[str] = []
        if confidence < ALTERNATIVES_CONFIDENCE_THRESHOLD:
            others = [s for s in self.known_signs if s != sign]
            count = min(self.rng.randint(1, MAX_ALTERNATIVES), len(others))
            alternatives = self.rng.sample(others, count)

        return Prediction(sign, confidence, alternatives, None, source="fallback")

    def _complete_phrase(self, sign: str) -> Optional[str]:
        """Attach a canned phrase to some labels with a fixed probability."""
        completion = PHRASE_COMPLETIONS.get(sign)
        if completion is None:
            return None
        probability, phrase = completion
        if self.rng.random() < probability:
            return phrase
        return None

    # ------------------------------------------------------------------
    # Practice guide
    # ------------------------------------------------------------------

    def get_sign_guide(self, sign_text: str) -> SignGuide:
        """
        Look up practice instructions for a sign.

        Args:
            sign_text: Free text such as "Thank you".

        Returns:
            SignGuide with success=False and a message when not found.
        """
        if not sign_text or not sign_text.strip():
            return SignGuide(
                success=False,
                sign="",
                message="Please enter text to get a sign guide."
            )

        sign = normalize_sign_text(sign_text)
        if sign in self.known_signs:
            return SignGuide(
                success=True,
                sign=sign,
                description=(
                    f"This is a placeholder guide for '{sign_text}'. In a full "
                    "implementation, you'd see a detailed visual animation or "
                    "step-by-step instructions on how to perform this sign. "
                    "Practice slowly!"
                ),
                skeleton_data=list(GUIDE_SKELETON)
            )

        logger.info(f"No practice guide for '{sign_text}'")
        return SignGuide(
            success=False,
            sign=sign,
            message=(
                f"Sign '{sign_text}' not found in our current dataset. "
                "Try 'hello' or 'thank you' (case-insensitive)!"
            )
        )
