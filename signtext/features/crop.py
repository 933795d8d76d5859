# signtext/features/crop.py
from __future__ import annotations

import cv2
import numpy as np

from .landmark_norm import BBox


def crop_region(image: np.ndarray, bbox: BBox) -> np.ndarray:
    """Crop (left, top, right, bottom); falls back to the whole image for an empty box."""
    left, top, right, bottom = bbox
    h, w = image.shape[:2]
    left, right = max(0, left), min(w, right)
    top, bottom = max(0, top), min(h, bottom)
    if right <= left or bottom <= top:
        return image
    return image[top:bottom, left:right]


def preprocess_crop(image_bgr: np.ndarray, bbox: BBox, size: int = 28) -> np.ndarray:
    """Crop the hand, convert to grayscale, resize to size x size and scale to [0,1]."""
    if image_bgr is None:
        raise ValueError("image is None")
    region = crop_region(image_bgr, bbox)
    if region.ndim == 3 and region.shape[2] == 3:
        gray = cv2.cvtColor(region, cv2.COLOR_BGR2GRAY)
    elif region.ndim == 2:
        gray = region
    else:
        raise ValueError(f"Unsupported image shape {region.shape}")
    resized = cv2.resize(gray, (size, size), interpolation=cv2.INTER_AREA)
    return resized.astype(np.float32) / 255.0
