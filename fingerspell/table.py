"""
First pass, part two: the lift-state lookup table.

Every combination of (thumb, index, middle, ring, pinky) lift states maps
to an ambiguity class. Neighbouring combinations are routed to the same
class on purpose, so that jitter near a threshold does not change the
family. Combinations no known handshape produces map to INVALID.
"""
from typing import Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigurationError, InvalidInputError
from .types import AmbiguityClass, FingerId, LiftState, LiftVector

D, M, U = LiftState.DOWN, LiftState.MIDDLE, LiftState.UP

NUM_LEVELS = 3
TABLE_SIZE = NUM_LEVELS ** len(FingerId)

DEFAULT_ENTRIES = {
    # thumb, index, middle, ring, pinky
    (D, D, D, D, D): AmbiguityClass.AEMNST,
    (M, D, D, D, D): AmbiguityClass.AEMNST,

    (D, U, U, D, D): AmbiguityClass.HKRUV,
    (M, U, U, D, D): AmbiguityClass.HKRUV,

    (D, U, D, D, D): AmbiguityClass.DGPQZ,
    (M, U, D, D, D): AmbiguityClass.DGPQZ,
    (M, U, D, D, M): AmbiguityClass.DGPQZ,
    (M, U, D, M, D): AmbiguityClass.DGPQZ,
    (M, U, D, M, M): AmbiguityClass.DGPQZ,
    (M, U, M, D, D): AmbiguityClass.DGPQZ,
    (M, U, M, D, M): AmbiguityClass.DGPQZ,
    (M, U, M, M, D): AmbiguityClass.DGPQZ,
    (M, U, M, M, M): AmbiguityClass.DGPQZ,
    (D, U, M, M, M): AmbiguityClass.DGPQZ,

    (U, U, D, D, D): AmbiguityClass.L,

    (D, D, D, D, U): AmbiguityClass.IJ,
    (M, D, D, D, U): AmbiguityClass.IJ,

    (M, U, U, U, U): AmbiguityClass.CO,
    (M, M, M, M, M): AmbiguityClass.CO,
    (D, M, M, M, M): AmbiguityClass.CO,

    (D, U, U, U, U): AmbiguityClass.B,

    (M, D, U, U, U): AmbiguityClass.F,
    (M, M, U, U, U): AmbiguityClass.F,

    (D, U, U, U, D): AmbiguityClass.W,
    (D, U, U, U, M): AmbiguityClass.W,

    (D, M, D, D, D): AmbiguityClass.X,
    (M, M, D, D, D): AmbiguityClass.X,

    (U, D, D, D, U): AmbiguityClass.Y,
    (U, D, D, D, M): AmbiguityClass.Y,
}


def table_index(lift_vector: Sequence[LiftState]) -> int:
    """
    Flat index of a lift vector (base-3 number, thumb most significant).

    Raises:
        InvalidInputError: if the vector is not five valid lift states
    """
    if len(lift_vector) != len(FingerId):
        raise InvalidInputError(f"Lift vector must have {len(FingerId)} entries, got {len(lift_vector)}")
    index = 0
    for state in lift_vector:
        if state not in (D, M, U):
            raise InvalidInputError(f"Lift state out of range: {state!r}")
        index = index * NUM_LEVELS + int(state)
    return index


class AmbiguityTable:
    """Read-only lookup from lift vector to ambiguity class."""

    def __init__(self, entries: Optional[Mapping[Tuple[LiftState, ...], AmbiguityClass]] = None):
        if entries is None:
            entries = DEFAULT_ENTRIES
        cells = [AmbiguityClass.INVALID] * TABLE_SIZE
        for vector, ambiguity_class in entries.items():
            try:
                cells[table_index(vector)] = AmbiguityClass(ambiguity_class)
            except (InvalidInputError, ValueError) as e:
                raise ConfigurationError(f"Bad lookup entry {vector!r} -> {ambiguity_class!r}: {e}") from e
        self._cells = tuple(cells)

    def __len__(self) -> int:
        return len(self._cells)

    def classify(self, lift_vector: LiftVector) -> AmbiguityClass:
        """
        Look up the ambiguity class of a lift vector.

        Raises:
            InvalidInputError: if any entry is INVALID or out of range
        """
        return self._cells[table_index(lift_vector)]

    def classes(self) -> frozenset:
        """Ambiguity classes reachable from at least one lift vector."""
        return frozenset(c for c in self._cells if c.is_valid)
