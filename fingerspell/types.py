"""
Type definitions for the fingerspelling classifier.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Protocol, Tuple, runtime_checkable


class LiftState(IntEnum):
    """Quantized extension level of one finger."""
    INVALID = -1
    DOWN = 0  # curled into the palm
    MIDDLE = 1
    UP = 2  # fully extended


class FingerId(IntEnum):
    """Finger identity. The order is the order of every 5-tuple in this package."""
    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


class BoneType(IntEnum):
    """Bones of a finger, from the wrist outwards."""
    METACARPAL = 0
    PROXIMAL = 1
    INTERMEDIATE = 2
    DISTAL = 3


class AmbiguityClass(Enum):
    """Coarse pose family produced by the lookup table, pending fine resolution."""
    INVALID = ""
    AEMNST = "AEMNST"
    B = "B"
    CO = "CO"
    DGPQZ = "DGPQZ"
    F = "F"
    HKRUV = "HKRUV"
    IJ = "IJ"
    L = "L"
    W = "W"
    X = "X"
    Y = "Y"

    @property
    def candidates(self) -> Tuple[str, ...]:
        """Letters this family may resolve to."""
        return tuple(self.value)

    @property
    def is_valid(self) -> bool:
        return self is not AmbiguityClass.INVALID


# Five lift states ordered thumb..pinky
LiftVector = Tuple[LiftState, LiftState, LiftState, LiftState, LiftState]


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of one processed frame."""
    ambiguity_class: AmbiguityClass
    raw_letter: Optional[str]  # resolver output, None when rejected
    committed_letter: Optional[str]  # raw_letter gated by dwell time


@dataclass
class DwellState:
    """Cross-frame memory of the dwell-time tracker."""
    last_raw_letter: Optional[str] = None
    last_change_time: Optional[float] = None  # seconds, monotonic clock


@runtime_checkable
class ClassificationListener(Protocol):
    """Observer notified when the committed letter or ambiguity class changes."""

    def on_letter(self, letter: Optional[str]) -> None:
        """Called with the new committed letter (lower case) or None."""
        ...

    def on_ambiguity_class(self, ambiguity_class: AmbiguityClass) -> None:
        """Called with the new ambiguity class."""
        ...
