"""
Hand frame value types consumed by the classifier, and the adapter that
builds them from 21-point hand landmarks.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .exceptions import InvalidInputError
from .geometry import as_vector, normalize
from .types import BoneType, FingerId


def _vec(value, name: str) -> np.ndarray:
    try:
        v = as_vector(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} is not a 3D vector: {value!r}") from e
    if not np.all(np.isfinite(v)):
        raise InvalidInputError(f"{name} is not finite: {v}")
    return v


@dataclass(eq=False)
class Bone:
    """One bone of a finger, between two joints."""
    prev_joint: np.ndarray  # closer to the wrist
    next_joint: np.ndarray  # closer to the tip

    def __post_init__(self):
        self.prev_joint = _vec(self.prev_joint, "prev_joint")
        self.next_joint = _vec(self.next_joint, "next_joint")

    @property
    def center(self) -> np.ndarray:
        return (self.prev_joint + self.next_joint) / 2.0

    @property
    def direction(self) -> np.ndarray:
        return normalize(self.next_joint - self.prev_joint)


@dataclass(eq=False)
class Finger:
    """A tracked finger: four bones plus tip and pointing direction."""
    finger_id: FingerId
    bones: Tuple[Bone, Bone, Bone, Bone]
    tip_position: np.ndarray
    direction: np.ndarray
    stabilized_tip_position: Optional[np.ndarray] = None

    def __post_init__(self):
        self.finger_id = FingerId(self.finger_id)
        self.bones = tuple(self.bones)
        if len(self.bones) != len(BoneType):
            raise InvalidInputError(
                f"{self.finger_id.name} has {len(self.bones)} bones, expected {len(BoneType)}"
            )
        self.tip_position = _vec(self.tip_position, "tip_position")
        self.direction = _vec(self.direction, "direction")
        if self.stabilized_tip_position is None:
            self.stabilized_tip_position = self.tip_position
        else:
            self.stabilized_tip_position = _vec(self.stabilized_tip_position, "stabilized_tip_position")

    def bone(self, bone_type: BoneType) -> Bone:
        return self.bones[bone_type]


@dataclass(eq=False)
class HandFrame:
    """
    A single tracked hand sample.

    Units are millimetres in a right-handed frame with +y up. The palm
    normal points out of the palm; direction points from the palm towards
    the fingers.
    """
    fingers: Tuple[Finger, Finger, Finger, Finger, Finger]
    palm_position: np.ndarray
    palm_normal: np.ndarray
    direction: np.ndarray
    is_right: bool = True
    timestamp: Optional[float] = None

    def __post_init__(self):
        self.fingers = tuple(self.fingers)
        ids = tuple(f.finger_id for f in self.fingers)
        if ids != tuple(FingerId):
            raise InvalidInputError(f"Fingers must be ordered thumb..pinky, got {ids}")
        self.palm_position = _vec(self.palm_position, "palm_position")
        self.palm_normal = _vec(self.palm_normal, "palm_normal")
        self.direction = _vec(self.direction, "direction")

    @property
    def is_left(self) -> bool:
        return not self.is_right

    def finger(self, finger_id: FingerId) -> Finger:
        return self.fingers[finger_id]


# MediaPipe landmark indices: joint chain per finger, wrist outwards.
# The thumb has no metacarpal in the Leap sense, so its first bone is zero length.
WRIST = 0
FINGER_JOINTS = {
    FingerId.THUMB: (1, 1, 2, 3, 4),
    FingerId.INDEX: (0, 5, 6, 7, 8),
    FingerId.MIDDLE: (0, 9, 10, 11, 12),
    FingerId.RING: (0, 13, 14, 15, 16),
    FingerId.PINKY: (0, 17, 18, 19, 20),
}
PALM_INDICES = (0, 5, 9, 13, 17)
INDEX_MCP, MIDDLE_MCP, PINKY_MCP = 5, 9, 17


def frame_from_landmarks(points: Sequence, is_right: bool = True, scale: float = 1000.0,
                         timestamp: Optional[float] = None) -> HandFrame:
    """
    Build a HandFrame from 21 hand landmarks in MediaPipe order.

    Args:
        points: 21 landmarks, either (x, y, z) sequences or objects with x/y/z.
            Image axes are expected (+y down, +z away from the camera).
        is_right: Handedness of the tracked hand
        scale: Factor applied to every coordinate (metres -> millimetres by default)
        timestamp: Optional capture time in seconds

    Returns:
        HandFrame in millimetres with +y up
    """
    if len(points) != 21:
        raise InvalidInputError(f"Expected 21 landmarks, got {len(points)}")

    # Flip y and z: keeps the frame right-handed with +y up
    flip = np.array([1.0, -1.0, -1.0]) * scale
    lm = np.array([as_vector(p) for p in points]) * flip

    wrist = lm[WRIST]
    normal = normalize(np.cross(lm[INDEX_MCP] - wrist, lm[PINKY_MCP] - wrist))
    if not is_right:
        normal = -normal

    direction = lm[MIDDLE_MCP] - wrist
    direction = normalize(direction - np.dot(direction, normal) * normal)

    fingers = []
    for finger_id, chain in FINGER_JOINTS.items():
        joints = [lm[i] for i in chain]
        bones = tuple(Bone(joints[i], joints[i + 1]) for i in range(len(BoneType)))
        fingers.append(Finger(
            finger_id=finger_id,
            bones=bones,
            tip_position=joints[-1],
            direction=bones[BoneType.INTERMEDIATE].direction,
        ))

    return HandFrame(
        fingers=tuple(fingers),
        palm_position=lm[list(PALM_INDICES)].mean(axis=0),
        palm_normal=normal,
        direction=direction,
        is_right=is_right,
        timestamp=timestamp,
    )
