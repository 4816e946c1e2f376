"""
Rule-based gesture detection for SignRecognizer.

Each rule is a geometric predicate over one HandFrame paired with the
label it produces. Rules are evaluated in order and the first match wins.
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Sequence

from .config import ClassifierThresholds, RULE_CONFIDENCE
from .landmarks import FINGER_TIP_MCP_PAIRS, HandFrame, LandmarkIndex
from .logger import get_logger

logger = get_logger("GestureRules")

_DEFAULT_THRESHOLDS = ClassifierThresholds()


def _fingers_curled(hand: HandFrame) -> bool:
    """All four non-thumb tips are below (greater y than) their knuckles."""
    return all(hand[tip].y > hand[mcp].y for tip, mcp in FINGER_TIP_MCP_PAIRS)


def _thumb_separated(hand: HandFrame, ratio: float) -> bool:
    """Thumb tip sits clearly away from the fist."""
    thumb_to_knuckle = hand.distance(LandmarkIndex.THUMB_TIP, LandmarkIndex.INDEX_MCP)
    palm_length = hand.distance(LandmarkIndex.WRIST, LandmarkIndex.INDEX_MCP)
    return thumb_to_knuckle > ratio * palm_length


def is_thumb_extended(hand: HandFrame, ratio: float = _DEFAULT_THRESHOLDS.thumb_extension) -> bool:
    """
    Check whether the thumb is held straight.

    Compares the direct CMC->TIP distance with the summed length of the
    three thumb segments. A straight thumb has a ratio close to 1.

    Args:
        hand: Hand frame to test.
        ratio: Minimum direct/segment ratio.

    Returns:
        True if the thumb is extended.
    """
    segments = (
        hand.distance(LandmarkIndex.THUMB_CMC, LandmarkIndex.THUMB_MCP)
        + hand.distance(LandmarkIndex.THUMB_MCP, LandmarkIndex.THUMB_IP)
        + hand.distance(LandmarkIndex.THUMB_IP, LandmarkIndex.THUMB_TIP)
    )
    if segments <= 0.0:
        return False
    direct = hand.distance(LandmarkIndex.THUMB_CMC, LandmarkIndex.THUMB_TIP)
    return direct >= ratio * segments


def is_greeting(hand: HandFrame, thresholds: ClassifierThresholds = _DEFAULT_THRESHOLDS) -> bool:
    """
    Raised open hand: fingers straight and level, thumb out.

    Args:
        hand: Hand frame to test.
        thresholds: Detection thresholds.

    Returns:
        True if the hand shows the "hello" gesture.
    """
    tip_ys = [hand[tip].y for tip, _ in FINGER_TIP_MCP_PAIRS]
    aligned = max(tip_ys) - min(tip_ys) <= thresholds.greeting_alignment
    raised = all(y < hand.wrist.y for y in tip_ys)
    return aligned and raised and is_thumb_extended(hand, thresholds.thumb_extension)


def is_affirmative(hand: HandFrame, thresholds: ClassifierThresholds = _DEFAULT_THRESHOLDS) -> bool:
    """
    Thumbs up: thumb above its base and the index knuckle, fist closed.

    Args:
        hand: Hand frame to test.
        thresholds: Detection thresholds.

    Returns:
        True if the hand shows the "yes" gesture.
    """
    thumb_tip_y = hand.thumb_tip.y
    thumb_up = thumb_tip_y < hand.thumb_mcp.y and thumb_tip_y < hand.index_mcp.y
    return (
        thumb_up
        and _fingers_curled(hand)
        and _thumb_separated(hand, thresholds.thumb_separation)
    )


def is_negative(hand: HandFrame, thresholds: ClassifierThresholds = _DEFAULT_THRESHOLDS) -> bool:
    """
    Thumbs down: thumb below its base and the wrist, fist closed.

    Args:
        hand: Hand frame to test.
        thresholds: Detection thresholds.

    Returns:
        True if the hand shows the "no" gesture.
    """
    thumb_tip_y = hand.thumb_tip.y
    thumb_down = thumb_tip_y > hand.thumb_mcp.y and thumb_tip_y > hand.wrist.y
    return (
        thumb_down
        and _fingers_curled(hand)
        and _thumb_separated(hand, thresholds.thumb_separation)
    )


@dataclass(frozen=True)
class GestureRule:
    """A gesture predicate and the prediction it yields on match."""
    label: str
    predicate: Callable[[HandFrame], bool]
    confidence: float = RULE_CONFIDENCE


def build_rules(thresholds: ClassifierThresholds = _DEFAULT_THRESHOLDS) -> tuple[GestureRule, ...]:
    """
    Build the hello / yes / no rule chain for a set of thresholds.

    Args:
        thresholds: Geometric tolerances and the confidence given on match.

    Returns:
        Rules in evaluation order.
    """
    return (
        GestureRule("hello", partial(is_greeting, thresholds=thresholds), thresholds.rule_confidence),
        GestureRule("yes", partial(is_affirmative, thresholds=thresholds), thresholds.rule_confidence),
        GestureRule("no", partial(is_negative, thresholds=thresholds), thresholds.rule_confidence),
    )


DEFAULT_RULES: tuple[GestureRule, ...] = build_rules()


def match_rules(hand: HandFrame, rules: Sequence[GestureRule] = DEFAULT_RULES) -> Optional[GestureRule]:
    """
    Evaluate rules in order and return the first that matches.

    Args:
        hand: Hand frame to classify.
        rules: Ordered rules; later rules are skipped after a match.

    Returns:
        The matching rule, or None.
    """
    for rule in rules:
        if rule.predicate(hand):
            logger.debug(f"Rule matched: {rule.label}")
            return rule
    return None
