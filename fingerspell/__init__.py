"""
Fingerspelling Recognition

A Python library that classifies tracked hand poses into fingerspelled
letters in real time: finger lift quantization, a lookup table of pose
families, geometric resolvers per family and dwell-time debouncing.
"""

__version__ = "0.1.0"
__author__ = "Fingerspell Team"

from .types import (
    LiftState,
    FingerId,
    BoneType,
    AmbiguityClass,
    ClassificationResult,
    DwellState,
    ClassificationListener,
)
from .exceptions import FingerspellError, InvalidInputError, ConfigurationError
from .config import load_config, Cfg
from .hand import Bone, Finger, HandFrame, frame_from_landmarks
from .quantizer import FingerQuantizer, extension_distance
from .table import AmbiguityTable
from .resolvers import RESOLVERS, resolve, validate_resolvers
from .dwell import DwellTracker
from .notifier import NotificationDispatcher, FrameWorker
from .classifier import FingerspellClassifier
from .listener_mock import MockListener

__all__ = [
    "LiftState",
    "FingerId",
    "BoneType",
    "AmbiguityClass",
    "ClassificationResult",
    "DwellState",
    "ClassificationListener",
    "FingerspellError",
    "InvalidInputError",
    "ConfigurationError",
    "load_config",
    "Cfg",
    "Bone",
    "Finger",
    "HandFrame",
    "frame_from_landmarks",
    "FingerQuantizer",
    "extension_distance",
    "AmbiguityTable",
    "RESOLVERS",
    "resolve",
    "validate_resolvers",
    "DwellTracker",
    "NotificationDispatcher",
    "FrameWorker",
    "FingerspellClassifier",
    "MockListener",
]
