# signtext/features/landmark_norm.py
from __future__ import annotations

from typing import Tuple

import numpy as np

WRIST = 0
NUM_LANDMARKS = 21
FEATURE_SIZE = NUM_LANDMARKS * 2

BBox = Tuple[int, int, int, int]


def landmark_features(lm: np.ndarray, eps: float = 1e-4) -> np.ndarray:
    """
    Build the 42-value classifier input from 21 hand landmarks:
      - translate x,y so the wrist (idx 0) is at the origin
      - flatten to [x0, y0, x1, y1, ...]
      - divide by the max absolute value (left as-is when that is ~0)

    Args:
        lm: (21,2) or (21,3) array; z is ignored
    Returns:
        (42,) float32
    """
    lm = np.asarray(lm, dtype=np.float32)
    if lm.ndim != 2 or lm.shape[0] != NUM_LANDMARKS or lm.shape[1] < 2:
        raise ValueError(f"Expected (21,2) or (21,3) landmarks, got {lm.shape}")

    rel = lm[:, :2] - lm[WRIST, :2]
    flat = rel.reshape(-1)
    max_abs = float(np.max(np.abs(flat)))
    if max_abs > eps:
        flat = flat / max_abs
    return flat.astype(np.float32)


def hand_bounding_box(lm: np.ndarray, width: int, height: int, padding: int = 25) -> BBox:
    """Pixel box (left, top, right, bottom) around normalized landmarks, padded and clamped to the image."""
    lm = np.asarray(lm, dtype=np.float32)
    if lm.ndim != 2 or lm.shape[1] < 2:
        raise ValueError(f"Expected (N,2+) landmarks, got {lm.shape}")
    xs = lm[:, 0] * width
    ys = lm[:, 1] * height
    left = max(0, int(float(xs.min()) - padding))
    top = max(0, int(float(ys.min()) - padding))
    right = min(int(width), int(float(xs.max()) + padding))
    bottom = min(int(height), int(float(ys.max()) + padding))
    return left, top, right, bottom
