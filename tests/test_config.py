"""
Test cases for configuration loading.
"""
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fingerspell import ConfigurationError, load_config
from fingerspell.config import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH
from fingerspell.types import FingerId


class TestLoadConfig(unittest.TestCase):
    """Test loading YAML configuration files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, text):
        path = Path(self.tmp.name) / "config.yaml"
        path.write_text(text)
        return str(path)

    def test_default_file(self):
        cfg = load_config(DEFAULT_CONFIG_PATH)
        cfg.validate()

        self.assertEqual(cfg.classifier.dwell_time_ms, 300.0)
        self.assertFalse(cfg.classifier.debug)
        self.assertEqual(cfg.thresholds.down[FingerId.THUMB], 10.0)
        self.assertEqual(cfg.thresholds.middle[FingerId.THUMB], 50.0)
        self.assertEqual(cfg.thresholds.down[FingerId.PINKY], 60.0)
        self.assertEqual(cfg.thresholds.middle[FingerId.PINKY], 70.0)
        self.assertEqual(cfg.resolvers.o_contact_mm, 40.0)
        self.assertEqual(cfg.resolvers.b_joint_gap_sq_mm, 1400.0)
        self.assertEqual(cfg.notifications.max_pending, 64)
        self.assertEqual(cfg.tracking.max_num_hands, 2)

    def test_env_var(self):
        path = self.write(
            "classifier:\n  dwell_time_ms: 500\n"
            "thresholds:\n"
            "  down: {thumb: 10, index: 65, middle: 65, ring: 65, pinky: 60}\n"
            "  middle: {thumb: 50, index: 80, middle: 80, ring: 80, pinky: 70}\n"
        )
        with mock.patch.dict(os.environ, {CONFIG_ENV_VAR: path}):
            cfg = load_config()
        self.assertEqual(cfg.classifier.dwell_time_ms, 500.0)
        # Unspecified sections fall back to defaults
        self.assertEqual(cfg.resolvers.f_contact_mm, 30.0)
        self.assertEqual(cfg.notifications.max_pending, 64)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(os.path.join(self.tmp.name, "nope.yaml"))

    def test_unknown_finger(self):
        path = self.write("thresholds:\n  down: {thumb: 10, toe: 3}\n")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_unknown_resolver_setting(self):
        path = self.write("resolvers:\n  o_contact: 40\n")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_missing_thresholds_fail_validation(self):
        cfg = load_config(self.write("thresholds:\n  down: {thumb: 10}\n"))
        with self.assertRaises(ConfigurationError):
            cfg.validate()

    def test_non_positive_resolver_constant(self):
        cfg = load_config(DEFAULT_CONFIG_PATH)
        cfg.resolvers.f_contact_mm = 0
        with self.assertRaises(ConfigurationError):
            cfg.validate()

    def test_empty_sections_use_defaults(self):
        """Test that a section key with no value falls back to defaults."""
        path = self.write(
            "classifier:\nresolvers:\nnotifications:\ntracking:\n"
            "thresholds:\n"
            "  down: {thumb: 10, index: 65, middle: 65, ring: 65, pinky: 60}\n"
            "  middle: {thumb: 50, index: 80, middle: 80, ring: 80, pinky: 70}\n"
        )
        cfg = load_config(path)
        cfg.validate()
        self.assertEqual(cfg.classifier.dwell_time_ms, 300.0)
        self.assertEqual(cfg.resolvers.o_contact_mm, 40.0)
        self.assertEqual(cfg.notifications.max_pending, 64)
        self.assertEqual(cfg.tracking.max_num_hands, 2)

    def test_empty_thresholds_fail_validation(self):
        cfg = load_config(self.write("thresholds:\n"))
        with self.assertRaises(ConfigurationError):
            cfg.validate()

    def test_non_numeric_values(self):
        """Test that values that are not numbers are configuration errors."""
        documents = [
            "classifier:\n  dwell_time_ms: slow\n",
            "resolvers:\n  o_contact_mm: [40]\n",
            "notifications:\n  max_pending: many\n",
            "tracking:\n  min_detection_confidence: high\n",
            "thresholds:\n  down: {thumb: low}\n",
        ]
        for text in documents:
            with self.subTest(text=text):
                with self.assertRaises(ConfigurationError) as ctx:
                    load_config(self.write(text))
                self.assertIsNotNone(ctx.exception.__cause__)

    def test_section_not_a_mapping(self):
        for text in ("resolvers: 5\n", "classifier: [1, 2]\n", "thresholds:\n  down: 10\n"):
            with self.subTest(text=text):
                with self.assertRaises(ConfigurationError):
                    load_config(self.write(text))

    def test_document_not_a_mapping(self):
        with self.assertRaises(ConfigurationError):
            load_config(self.write("- classifier\n- thresholds\n"))

    def test_unknown_finger_chains_cause(self):
        with self.assertRaises(ConfigurationError) as ctx:
            load_config(self.write("thresholds:\n  middle: {toe: 3}\n"))
        self.assertIsInstance(ctx.exception.__cause__, KeyError)


if __name__ == '__main__':
    unittest.main()
