# signtext/features/mediapipe_hands.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import cv2
import numpy as np

try:
    import mediapipe as mp
except ImportError as e:
    raise RuntimeError(
        "mediapipe is required. Install it in your venv:\n"
        "  pip install mediapipe==0.10.14"
    ) from e

from .landmark_norm import BBox, hand_bounding_box

logger = logging.getLogger(__name__)
mp_hands = mp.solutions.hands


@dataclass
class HandResult:
    """Single hand prediction from MediaPipe Hands."""
    landmarks: np.ndarray               # (21, 3) normalized image coords: x,y in [0,1], z relative
    handedness: str                     # 'Left' or 'Right'
    score: float

    def bounding_box(self, width: int, height: int, padding: int = 25) -> BBox:
        return hand_bounding_box(self.landmarks, width, height, padding)


class HandsWrapper:
    """
    Thin wrapper around MediaPipe Hands used as the hand detector.

    Runs synchronously per frame (video mode), so the caller always gets a
    finished result for the frame it passed in.
    """

    def __init__(
        self,
        max_num_hands: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        model_complexity: int = 1,
    ) -> None:
        self.max_num_hands = int(max_num_hands)
        self.det_conf = float(min_detection_confidence)
        self.trk_conf = float(min_tracking_confidence)
        self.model_complexity = int(model_complexity)

        self._hands = mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=self.max_num_hands,
            min_detection_confidence=self.det_conf,
            min_tracking_confidence=self.trk_conf,
            model_complexity=self.model_complexity,
        )
        logger.info(
            "MediaPipe Hands initialized (max=%d, det=%.2f, track=%.2f, complexity=%d)",
            self.max_num_hands, self.det_conf, self.trk_conf, self.model_complexity
        )

    def process_image(self, image_bgr: np.ndarray) -> List[HandResult]:
        """Run the detector on a BGR frame. Returns a (possibly empty) list of HandResult."""
        if image_bgr is None:
            raise ValueError("image is None")
        rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
        results = self._hands.process(rgb)

        out: List[HandResult] = []
        if not results or results.multi_hand_landmarks is None:
            return out

        handed = results.multi_handedness or []
        for i, hand_lms in enumerate(results.multi_hand_landmarks):
            lm = np.array([[p.x, p.y, p.z] for p in hand_lms.landmark], dtype=np.float32)  # (21,3)
            if i < len(handed) and handed[i].classification:
                label = handed[i].classification[0].label
                score = float(handed[i].classification[0].score)
            else:
                label, score = "Unknown", 0.0
            out.append(HandResult(landmarks=lm, handedness=label, score=score))
        return out

    def close(self) -> None:
        self._hands.close()
        logger.info("MediaPipe Hands closed")
