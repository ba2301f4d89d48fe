"""
Mock listener implementation for testing classifier notifications.
"""
import logging
import threading
from typing import List, Optional

from .types import AmbiguityClass, ClassificationListener

logger = logging.getLogger(__name__)


class MockListener(ClassificationListener):
    """Mock listener that records and logs notifications instead of acting on them."""

    def __init__(self):
        """Initialize the mock listener."""
        self.letters: List[Optional[str]] = []
        self.ambiguity_classes: List[AmbiguityClass] = []
        self._lock = threading.Lock()

    @property
    def letter_count(self) -> int:
        return len(self.letters)

    @property
    def ambiguity_count(self) -> int:
        return len(self.ambiguity_classes)

    def on_letter(self, letter: Optional[str]) -> None:
        """Record a letter change."""
        with self._lock:
            self.letters.append(letter)
        logger.info("[MockListener] Letter: %r (call #%d)", letter, self.letter_count)

    def on_ambiguity_class(self, ambiguity_class: AmbiguityClass) -> None:
        """Record an ambiguity class change."""
        with self._lock:
            self.ambiguity_classes.append(ambiguity_class)
        logger.info("[MockListener] Ambiguity class: %s (call #%d)", ambiguity_class.name, self.ambiguity_count)

    def reset_counters(self) -> None:
        """Forget recorded notifications."""
        with self._lock:
            self.letters.clear()
            self.ambiguity_classes.clear()
