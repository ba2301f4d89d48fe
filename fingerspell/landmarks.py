"""
Hand frame source using MediaPipe Hands.

Needs the `tracking` extra (mediapipe, opencv-python).
"""
import time
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from .config import TrackingConfig
from .hand import HandFrame, frame_from_landmarks


class HandsTracker:
    """Hand landmark tracker producing single-hand frames for the classifier."""

    def __init__(self, cfg: Optional[TrackingConfig] = None):
        """
        Initialize the hands tracker.

        Args:
            cfg: MediaPipe settings. max_num_hands should stay above 1 so that
                a second hand is seen and the frame rejected.
        """
        cfg = cfg or TrackingConfig()
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=cfg.max_num_hands,
            min_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence
        )

    def process(self, frame_bgr: np.ndarray, t_now: Optional[float] = None) -> Optional[HandFrame]:
        """
        Process a camera frame.

        Args:
            frame_bgr: Input frame in BGR format
            t_now: Capture time in seconds, defaults to time.monotonic()

        Returns:
            HandFrame when exactly one hand is visible, None otherwise
        """
        if t_now is None:
            t_now = time.monotonic()

        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)
        return self.frame_from_results(results, t_now)

    @staticmethod
    def frame_from_results(results, t_now: Optional[float] = None) -> Optional[HandFrame]:
        """Convert a MediaPipe Hands result, rejecting zero or several hands."""
        world = results.multi_hand_world_landmarks
        if not world or len(world) != 1:
            return None

        is_right = True
        if results.multi_handedness:
            is_right = results.multi_handedness[0].classification[0].label == "Right"

        return frame_from_landmarks(world[0].landmark, is_right=is_right, timestamp=t_now)

    def close(self) -> None:
        self.hands.close()
