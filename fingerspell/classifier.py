"""
Fingerspelling classifier: turns a stream of hand frames into letters.
"""
import logging
import threading
import time
from typing import List, Mapping, Optional

from .config import Cfg
from .dwell import DwellTracker
from .exceptions import ConfigurationError, InvalidInputError
from .hand import HandFrame
from .notifier import NotificationDispatcher
from .quantizer import FingerQuantizer
from .resolvers import RESOLVERS, Resolver, validate_resolvers
from .table import AmbiguityTable
from .types import AmbiguityClass, ClassificationListener, ClassificationResult

logger = logging.getLogger(__name__)

TRACKING_LOST = ClassificationResult(
    ambiguity_class=AmbiguityClass.INVALID, raw_letter=None, committed_letter=None
)


def _normalize_letter(letter: Optional[str]) -> Optional[str]:
    return letter.lower() if letter else None


class FingerspellClassifier:
    """
    Two-pass letter classifier with dwell-time debouncing.

    Per frame: quantize the five fingers into a lift vector, look up the
    ambiguity class, run that class's resolver, then gate the result through
    the dwell tracker. The last class and committed letter are held so that
    polling between frames is cheap, and listeners are notified once per
    change on a separate thread.

    All public methods are safe to call from several threads; frames must
    still be delivered in capture order (see FrameWorker).
    """

    def __init__(self, cfg: Cfg, table: Optional[AmbiguityTable] = None,
                 resolvers: Mapping[AmbiguityClass, Resolver] = RESOLVERS,
                 dispatcher: Optional[NotificationDispatcher] = None):
        """
        Initialize the classifier.

        Raises:
            ConfigurationError: if thresholds are inconsistent or a resolver
                is missing
        """
        self.cfg = cfg
        try:
            cfg.validate()
            self.resolvers = validate_resolvers(resolvers)
            self.quantizer = FingerQuantizer(cfg.thresholds.down, cfg.thresholds.middle)
            self.table = table if table is not None else AmbiguityTable()
        except ConfigurationError as e:
            logger.error("❌ Classifier configuration rejected: %s", e)
            raise

        self.dwell = DwellTracker(cfg.classifier.dwell_time_ms)
        self.dispatcher = dispatcher or NotificationDispatcher(cfg.notifications.max_pending)
        self.debug = cfg.classifier.debug

        self._lock = threading.RLock()
        self._listeners: List[ClassificationListener] = []
        self._ambiguity_class = AmbiguityClass.INVALID
        self._letter: Optional[str] = None
        self._last_result = TRACKING_LOST

    # ------------------------------------------------------------------ config

    @property
    def dwell_time_ms(self) -> float:
        return self.dwell.dwell_time_ms

    @dwell_time_ms.setter
    def dwell_time_ms(self, value: float) -> None:
        with self._lock:
            self.dwell.dwell_time_ms = value

    # --------------------------------------------------------------- listeners

    def add_listener(self, listener: ClassificationListener) -> None:
        """Register a listener for letter and ambiguity class changes."""
        if not isinstance(listener, ClassificationListener):
            raise TypeError(f"{listener!r} does not implement on_letter/on_ambiguity_class")
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ClassificationListener) -> None:
        with self._lock:
            self._listeners.remove(listener)

    # --------------------------------------------------------------- accessors

    @property
    def letter(self) -> Optional[str]:
        """Currently committed letter in lower case, None if there is none."""
        with self._lock:
            return _normalize_letter(self._letter)

    def get_letter(self) -> Optional[str]:
        return self.letter

    def compare_letter(self, letter: Optional[str]) -> bool:
        """Case-insensitive check of the committed letter."""
        return self.letter == _normalize_letter(letter)

    @property
    def ambiguity_class(self) -> AmbiguityClass:
        with self._lock:
            return self._ambiguity_class

    @property
    def last_result(self) -> ClassificationResult:
        with self._lock:
            return self._last_result

    # -------------------------------------------------------------- processing

    def process_frame(self, hand: Optional[HandFrame], t_now: Optional[float] = None) -> ClassificationResult:
        """
        Classify one frame.

        Args:
            hand: Single tracked hand, or None when no hand (or more than one
                hand) is visible
            t_now: Current time in seconds; defaults to time.monotonic()

        Returns:
            ClassificationResult for this frame
        """
        if t_now is None:
            t_now = time.monotonic()

        with self._lock:
            if hand is None:
                # Tracking loss is reported at once, without dwell
                self.dwell.reset()
                result = TRACKING_LOST
            else:
                result = self._classify(hand, t_now)

            self._last_result = result
            self._set_ambiguity_class(result.ambiguity_class)
            self._set_letter(result.committed_letter)
            return result

    def _classify(self, hand: HandFrame, t_now: float) -> ClassificationResult:
        try:
            lift_vector = self.quantizer.lift_vector(hand)
            ambiguity_class = self.table.classify(lift_vector)
            raw_letter = None
            if ambiguity_class.is_valid:
                raw_letter = self.resolvers[ambiguity_class](hand, self.cfg.resolvers)
        except InvalidInputError as e:
            logger.debug("Frame rejected: %s", e)
            lift_vector, ambiguity_class, raw_letter = None, AmbiguityClass.INVALID, None

        committed = self.dwell.update(raw_letter, t_now)
        if lift_vector is not None:
            self._trace("Lift %s -> %s -> %r (held %.0f ms)",
                        [s.name for s in lift_vector], ambiguity_class.name, raw_letter,
                        self.dwell.elapsed_ms(t_now))
        return ClassificationResult(
            ambiguity_class=ambiguity_class, raw_letter=raw_letter, committed_letter=committed
        )

    def _set_letter(self, letter: Optional[str]) -> None:
        if letter == self._letter:
            return
        self._letter = letter
        value = _normalize_letter(letter)
        for listener in self._listeners:
            self._trace("Letter listener called. Value: %r", value)
            self.dispatcher.submit(listener.on_letter, value)

    def _set_ambiguity_class(self, ambiguity_class: AmbiguityClass) -> None:
        if ambiguity_class == self._ambiguity_class:
            return
        self._ambiguity_class = ambiguity_class
        for listener in self._listeners:
            self._trace("Ambiguity listener called. Value: %s", ambiguity_class.name)
            self.dispatcher.submit(listener.on_ambiguity_class, ambiguity_class)

    def _trace(self, msg: str, *args) -> None:
        logger.log(logging.INFO if self.debug else logging.DEBUG, msg, *args)

    def close(self) -> None:
        """Deliver pending notifications and stop the listener thread."""
        self.dispatcher.close()
