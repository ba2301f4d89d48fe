"""
Configuration management for the fingerspelling classifier.
"""
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .types import FingerId

CONFIG_ENV_VAR = "FINGERSPELL_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


@dataclass
class ClassifierConfig:
    """Dwell time and tracing settings."""
    dwell_time_ms: float = 300.0
    debug: bool = False


@dataclass
class ThresholdsConfig:
    """Per-finger lift thresholds in millimetres."""
    down: Dict[FingerId, float]
    middle: Dict[FingerId, float]


@dataclass
class ResolverConfig:
    """Geometric constants used by the second-pass resolvers."""
    o_contact_mm: float = 40.0
    b_joint_gap_sq_mm: float = 1400.0
    f_contact_mm: float = 30.0
    dgpqz_angle_deg: float = 30.0
    dq_angle_scale: float = 1.5
    hkruv_equal_distance_mm: float = 7.0
    hkruv_finger_point_deg: float = 12.0
    hkruv_fingers_apart_mm: float = 25.0
    hkruv_tilt_deg: float = 45.0


@dataclass
class NotificationConfig:
    """Listener delivery settings."""
    max_pending: int = 64


@dataclass
class TrackingConfig:
    """MediaPipe Hands settings for the optional frame source."""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.6
    min_tracking_confidence: float = 0.6


@dataclass
class Cfg:
    """Main configuration class."""
    classifier: ClassifierConfig
    thresholds: ThresholdsConfig
    resolvers: ResolverConfig
    notifications: NotificationConfig
    tracking: TrackingConfig

    def validate(self) -> None:
        """
        Check invariants that must hold before any frame is processed.

        Raises:
            ConfigurationError: on the first violated invariant
        """
        for finger_id in FingerId:
            down = self.thresholds.down.get(finger_id)
            middle = self.thresholds.middle.get(finger_id)
            if down is None or middle is None:
                raise ConfigurationError(f"Missing lift thresholds for {finger_id.name.lower()}")
            if not down < middle:
                raise ConfigurationError(
                    f"Down threshold ({down}) must be below middle threshold ({middle}) "
                    f"for {finger_id.name.lower()}"
                )

        for name, value in vars(self.resolvers).items():
            if value <= 0:
                raise ConfigurationError(f"Resolver constant {name} must be positive, got {value}")

        if self.classifier.dwell_time_ms < 0:
            raise ConfigurationError(f"dwell_time_ms must not be negative, got {self.classifier.dwell_time_ms}")

        if self.notifications.max_pending < 1:
            raise ConfigurationError(f"max_pending must be at least 1, got {self.notifications.max_pending}")


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses $FINGERSPELL_CONFIG
            (a .env file is honoured) or the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        load_dotenv()
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return _dict_to_config(data or {})


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a config section; a key with no value counts as an empty section."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping, got {section!r}")
    return section


def _finger_map(data: Dict[str, Any], section: str) -> Dict[FingerId, float]:
    """Convert a {finger name: mm} mapping keyed by name into FingerId keys."""
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"thresholds.{section} must be a mapping, got {data!r}")
    result = {}
    for name, value in (data or {}).items():
        try:
            finger_id = FingerId[str(name).upper()]
        except KeyError as e:
            raise ConfigurationError(f"Unknown finger '{name}' in thresholds.{section}") from e
        try:
            result[finger_id] = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"thresholds.{section}.{name} is not a number: {value!r}") from e
    return result


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    thresholds_data = _section(data, 'thresholds')
    thresholds = ThresholdsConfig(
        down=_finger_map(thresholds_data.get('down'), 'down'),
        middle=_finger_map(thresholds_data.get('middle'), 'middle')
    )

    resolvers_data = _section(data, 'resolvers')
    unknown = set(resolvers_data) - set(vars(ResolverConfig()))
    if unknown:
        raise ConfigurationError(f"Unknown resolver settings: {', '.join(sorted(unknown))}")

    classifier_data = _section(data, 'classifier')
    notifications_data = _section(data, 'notifications')
    tracking_data = _section(data, 'tracking')

    try:
        classifier = ClassifierConfig(
            dwell_time_ms=float(classifier_data.get('dwell_time_ms', ClassifierConfig.dwell_time_ms)),
            debug=bool(classifier_data.get('debug', ClassifierConfig.debug))
        )

        resolvers = ResolverConfig(**{k: float(v) for k, v in resolvers_data.items()})

        notifications = NotificationConfig(
            max_pending=int(notifications_data.get('max_pending', NotificationConfig.max_pending))
        )

        tracking = TrackingConfig(
            max_num_hands=int(tracking_data.get('max_num_hands', TrackingConfig.max_num_hands)),
            min_detection_confidence=float(
                tracking_data.get('min_detection_confidence', TrackingConfig.min_detection_confidence)
            ),
            min_tracking_confidence=float(
                tracking_data.get('min_tracking_confidence', TrackingConfig.min_tracking_confidence)
            )
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid config value: {e}") from e

    return Cfg(
        classifier=classifier,
        thresholds=thresholds,
        resolvers=resolvers,
        notifications=notifications,
        tracking=tracking
    )
