"""
Dwell-time debouncing of resolved letters.
"""
from typing import Optional

from .types import DwellState


class DwellTracker:
    """
    Only lets a letter through once it has been the raw result continuously
    for the configured dwell time.

    Any change of the raw result (including to or from None) restarts the
    timer and suppresses output for that frame, so partial progress towards
    a commitment is discarded on every interruption.
    """

    def __init__(self, dwell_time_ms: float):
        self.state = DwellState()
        self.dwell_time_ms = dwell_time_ms

    @property
    def dwell_time_ms(self) -> float:
        """Required hold time. Changing it applies to the letter already being held."""
        return self._dwell_time_ms

    @dwell_time_ms.setter
    def dwell_time_ms(self, value: float) -> None:
        value = float(value)
        if value < 0:
            raise ValueError(f"dwell_time_ms must not be negative, got {value}")
        self._dwell_time_ms = value

    def update(self, raw_letter: Optional[str], t_now: float) -> Optional[str]:
        """
        Feed this frame's raw letter.

        Args:
            raw_letter: Resolver output, None for no letter
            t_now: Current time in seconds (monotonic)

        Returns:
            The committed letter, or None while unstable
        """
        if raw_letter != self.state.last_raw_letter or self.state.last_change_time is None:
            self.state.last_raw_letter = raw_letter
            self.state.last_change_time = t_now
            return None

        if raw_letter is None:
            return None

        elapsed_ms = (t_now - self.state.last_change_time) * 1000.0
        if elapsed_ms >= self._dwell_time_ms:
            return raw_letter
        return None

    def reset(self) -> None:
        """Forget the current letter, e.g. when tracking is lost."""
        self.state = DwellState()

    def elapsed_ms(self, t_now: float) -> float:
        """Time the current raw letter has been held, 0 if nothing is held."""
        if self.state.last_change_time is None:
            return 0.0
        return max(0.0, (t_now - self.state.last_change_time) * 1000.0)
