"""
Per-frame recognition pipeline.

Connects the classifier, session state and speech output. The app loop
calls process() once per video frame with whatever hands the detector
found; the call is synchronous and nothing is queued between frames.
"""

from typing import Any, Optional

from .sign_classifier import Prediction, SignClassifier
from .session import SessionState
from .speech import SpeechQueue, should_announce
from .logger import get_logger

logger = get_logger("Pipeline")


class RecognitionPipeline:
    """
    Classify, announce and record one frame at a time.

    Attributes:
        classifier: Sign classifier.
        session: Session state owned by the caller.
        speech: Optional speech queue (None disables announcements).
    """

    def __init__(
        self,
        classifier: SignClassifier,
        session: SessionState,
        speech: Optional[SpeechQueue] = None
    ):
        self.classifier = classifier
        self.session = session
        self.speech = speech
        self.last_prediction: Optional[Prediction] = None

    def process(self, left_hand: Any = None, right_hand: Any = None) -> Prediction:
        """
        Handle one frame's landmarks.

        Args:
            left_hand: Left-hand landmarks or None.
            right_hand: Right-hand landmarks or None.

        Returns:
            The frame's prediction.
        """
        prediction = self.classifier.predict(self.session.user_id, left_hand, right_hand)

        if should_announce(prediction, self.session.last_spoken_text):
            self._say(prediction.spoken_text)
            self.session.last_spoken_text = prediction.spoken_text

        if self.session.apply(prediction):
            logger.debug(
                f"Counted {prediction.sign} ({prediction.confidence:.2f}%, {prediction.source})"
            )
        self.last_prediction = prediction
        return prediction

    def speak_current(self, prediction: Optional[Prediction] = None) -> bool:
        """
        Announce a shown result, phrase completion included.

        Args:
            prediction: Result on screen (default: the latest prediction).

        Returns:
            True if queued; sentinels and missing speech return False.
        """
        current = prediction if prediction is not None else self.last_prediction
        if current is None or not current.is_hand_detected:
            return False
        return self._say(current.spoken_text)

    def switch_user(self, user_id: str) -> bool:
        """
        Change the active user.

        Returns:
            True if the user has a profile, False if defaults apply.
        """
        known = self.classifier.load_user_profile(user_id)
        self.session.switch_user(user_id)
        return known

    def _say(self, text: str) -> bool:
        if self.speech is None:
            return False
        return self.speech.say(text)
