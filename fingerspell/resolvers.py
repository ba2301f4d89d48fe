"""
Second pass: resolve an ambiguity class to a concrete letter.

Each resolver is a pure function of a hand frame and the resolver constants,
returning an upper-case letter or None when the pose does not match any
letter of its family confidently.

Letters that need motion to tell apart (J from I, Z from D, true W) are
not disambiguated; their families resolve to a single fixed letter.
"""
import logging
from typing import Callable, Dict, Mapping, Optional

import numpy as np

from .config import ResolverConfig
from .exceptions import ConfigurationError, InvalidInputError
from .geometry import DOWN, UP, angle_between, distance, signed_projection, sq_distance
from .hand import HandFrame
from .types import AmbiguityClass, BoneType, FingerId

logger = logging.getLogger(__name__)

Resolver = Callable[[HandFrame, ResolverConfig], Optional[str]]


def fingers_in_contact(hand: HandFrame, first: FingerId, second: FingerId, threshold: float) -> bool:
    """True when the two fingertips are within threshold of each other."""
    return distance(hand.finger(first).tip_position, hand.finger(second).tip_position) <= threshold


def _side_facing(hand: HandFrame) -> np.ndarray:
    """Palm normal x palm direction: the pinky edge of a right hand, the thumb edge of a left one."""
    return np.cross(hand.palm_normal, hand.direction)


def _sideways_angle(hand: HandFrame) -> float:
    """Angle between the thumb edge of the hand and straight up. Small when the hand is on its side."""
    reference = UP if hand.is_left else DOWN
    return angle_between(reference, _side_facing(hand))


def resolve_aemnst(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    index = hand.finger(FingerId.INDEX)
    thumb = hand.finger(FingerId.THUMB)

    # 'A': thumb tip on the outer side of the plane through the index finger
    knuckle = index.bone(BoneType.INTERMEDIATE).prev_joint
    along = index.tip_position - knuckle
    back = index.bone(BoneType.METACARPAL).prev_joint - knuckle
    side = signed_projection(thumb.tip_position - knuckle, np.cross(along, back))
    if not hand.is_right:
        side = -side
    if side > 0:
        return 'A'

    # 'O': thumb closed onto the middle finger
    if distance(thumb.tip_position, hand.finger(FingerId.MIDDLE).tip_position) < params.o_contact_mm:
        return 'O'
    return None


def resolve_b(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    # Knuckles between intermediate and distal bones, index..pinky
    knuckles = [
        hand.finger(f).bone(BoneType.INTERMEDIATE).next_joint
        for f in (FingerId.INDEX, FingerId.MIDDLE, FingerId.RING, FingerId.PINKY)
    ]
    for a, b in zip(knuckles, knuckles[1:]):
        if sq_distance(a, b) >= params.b_joint_gap_sq_mm:
            return None
    return 'B'


def resolve_co(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    gap = distance(hand.finger(FingerId.MIDDLE).tip_position, hand.finger(FingerId.THUMB).tip_position)
    return 'O' if gap < params.o_contact_mm else 'C'


def resolve_dgpqz(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    threshold = params.dgpqz_angle_deg
    wide = params.dq_angle_scale * threshold

    if _sideways_angle(hand) < threshold:
        return 'G'

    palm_down = angle_between(DOWN, hand.palm_normal)
    if palm_down < threshold:
        return 'P'

    pointing_up = angle_between(UP, hand.direction)
    if pointing_up < wide:
        return 'D'

    if pointing_up > 90 and palm_down < wide:
        return 'Q'

    return None


def resolve_f(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    if fingers_in_contact(hand, FingerId.INDEX, FingerId.THUMB, params.f_contact_mm):
        return 'F'
    return None


def resolve_hkruv(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    index = hand.finger(FingerId.INDEX)
    middle = hand.finger(FingerId.MIDDLE)
    thumb_tip = hand.finger(FingerId.THUMB).stabilized_tip_position

    thumb_to_index = distance(index.bone(BoneType.PROXIMAL).center, thumb_tip)
    thumb_to_middle = distance(middle.bone(BoneType.PROXIMAL).center, thumb_tip)
    divergence = angle_between(middle.direction, index.direction)
    tilt = _sideways_angle(hand)

    logger.debug("HKRUV tilt=%.1f divergence=%.1f thumb->index=%.1f thumb->middle=%.1f",
                 tilt, divergence, thumb_to_index, thumb_to_middle)

    # Index and middle together: H (hand on its side), R (crossed) or U
    if fingers_in_contact(hand, FingerId.INDEX, FingerId.MIDDLE, params.hkruv_fingers_apart_mm):
        if tilt < params.hkruv_tilt_deg:
            return 'H'
        if divergence > params.hkruv_finger_point_deg:
            return 'R'
        return 'U'

    # Apart: K when the thumb sits between them, otherwise V
    if abs(thumb_to_index - thumb_to_middle) < params.hkruv_equal_distance_mm:
        return 'K'
    return 'V'


def resolve_ij(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    return 'I'


def resolve_l(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    return 'L'


def resolve_w(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    return 'W'


def resolve_x(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    return 'X'


def resolve_y(hand: HandFrame, params: ResolverConfig) -> Optional[str]:
    return 'Y'


RESOLVERS: Mapping[AmbiguityClass, Resolver] = {
    AmbiguityClass.AEMNST: resolve_aemnst,
    AmbiguityClass.B: resolve_b,
    AmbiguityClass.CO: resolve_co,
    AmbiguityClass.DGPQZ: resolve_dgpqz,
    AmbiguityClass.F: resolve_f,
    AmbiguityClass.HKRUV: resolve_hkruv,
    AmbiguityClass.IJ: resolve_ij,
    AmbiguityClass.L: resolve_l,
    AmbiguityClass.W: resolve_w,
    AmbiguityClass.X: resolve_x,
    AmbiguityClass.Y: resolve_y,
}


def validate_resolvers(resolvers: Mapping[AmbiguityClass, Resolver]) -> Dict[AmbiguityClass, Resolver]:
    """
    Check that every valid ambiguity class has exactly one callable resolver.

    Returns:
        A private copy of the dispatch table

    Raises:
        ConfigurationError: listing every class without a resolver
    """
    missing = [c.name for c in AmbiguityClass if c.is_valid and not callable(resolvers.get(c))]
    if missing:
        raise ConfigurationError(f"No resolver registered for: {', '.join(missing)}")
    if AmbiguityClass.INVALID in resolvers:
        raise ConfigurationError("INVALID must not have a resolver")
    return dict(resolvers)


def resolve(ambiguity_class: AmbiguityClass, hand: Optional[HandFrame], params: ResolverConfig,
            resolvers: Mapping[AmbiguityClass, Resolver] = RESOLVERS) -> Optional[str]:
    """
    Run the resolver for an ambiguity class.

    Raises:
        InvalidInputError: if there is no frame to resolve against
    """
    if not ambiguity_class.is_valid:
        return None
    if hand is None:
        raise InvalidInputError(f"No hand frame to resolve {ambiguity_class.name}")
    return resolvers[ambiguity_class](hand, params)
