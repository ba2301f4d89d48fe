"""
First pass, part one: measure how far each finger is extended and
quantize the measurement into a lift state.
"""
import math
from typing import Mapping

import numpy as np

from .exceptions import ConfigurationError, InvalidInputError
from .geometry import distance, signed_projection
from .hand import HandFrame
from .types import BoneType, FingerId, LiftState, LiftVector


def extension_distance(hand: HandFrame, finger_id: FingerId) -> float:
    """
    Extension metric for one finger. Larger means more extended.

    The thumb moves sideways across the palm rather than away from it, so it
    is measured as a signed offset from the plane spanned by the palm
    direction and the palm normal (positive = away from the palm, for either
    hand). The other fingers use the distance from the palm centre to the
    centre of their distal bone.
    """
    finger = hand.finger(finger_id)
    if finger_id == FingerId.THUMB:
        side = np.cross(hand.direction, hand.palm_normal)
        d = signed_projection(finger.tip_position - hand.palm_position, side)
        return d if hand.is_right else -d
    return distance(hand.palm_position, finger.bone(BoneType.DISTAL).center)


class FingerQuantizer:
    """Maps per-finger extension distances onto DOWN / MIDDLE / UP."""

    def __init__(self, down: Mapping[FingerId, float], middle: Mapping[FingerId, float]):
        """
        Args:
            down: Distance below which a finger is DOWN
            middle: Distance below which a finger is MIDDLE (otherwise UP)

        Raises:
            ConfigurationError: if a finger is missing or down >= middle
        """
        self.down = {}
        self.middle = {}
        for finger_id in FingerId:
            if finger_id not in down or finger_id not in middle:
                raise ConfigurationError(f"Missing lift thresholds for {finger_id.name}")
            lo, hi = float(down[finger_id]), float(middle[finger_id])
            if not lo < hi:
                raise ConfigurationError(
                    f"Down threshold ({lo}) must be below middle threshold ({hi}) for {finger_id.name}"
                )
            self.down[finger_id] = lo
            self.middle[finger_id] = hi

    def quantize(self, finger_id: FingerId, extension: float) -> LiftState:
        if extension < self.down[finger_id]:
            return LiftState.DOWN
        if extension < self.middle[finger_id]:
            return LiftState.MIDDLE
        return LiftState.UP

    def lift_vector(self, hand: HandFrame) -> LiftVector:
        """Quantize all five fingers of a frame, thumb first."""
        states = []
        for finger_id in FingerId:
            d = extension_distance(hand, finger_id)
            if not math.isfinite(d):
                raise InvalidInputError(f"Non-finite extension for {finger_id.name}: {d}")
            states.append(self.quantize(finger_id, d))
        return tuple(states)
