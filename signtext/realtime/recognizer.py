from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import numpy as np

from .stabilizer import Prediction

LOGGER = logging.getLogger(__name__)


class FrameRecognizer:
    """
    Detector + classifier for one frame: returns a Prediction with the hand's
    bounding box attached, or None when no hand is found.

    `hands` needs `process_image(frame) -> list` of results exposing
    `.landmarks` and `.bounding_box(w, h, padding)`; `classifier` needs
    `classify(landmarks, frame, bbox)`.
    """

    def __init__(self, hands, classifier, bbox_padding: int = 25):
        self.hands = hands
        self.classifier = classifier
        self.bbox_padding = int(bbox_padding)
        self.frames_seen = 0

    def recognize(self, frame_bgr: np.ndarray) -> Optional[Prediction]:
        self.frames_seen += 1
        found = self.hands.process_image(frame_bgr)
        if not found:
            return None

        hand = found[0]
        h, w = frame_bgr.shape[:2]
        bbox = hand.bounding_box(w, h, self.bbox_padding)
        if self.frames_seen % 30 == 0:
            LOGGER.debug("Hand detected, frame #%d bbox=%s", self.frames_seen, bbox)

        try:
            pred = self.classifier.classify(hand.landmarks, frame_bgr, bbox)
        except ValueError as e:
            LOGGER.warning("Classification failed on frame #%d: %s", self.frames_seen, e)
            return None
        if pred is None:
            return None
        return replace(pred, bbox=bbox)

    def close(self) -> None:
        self.hands.close()
