# signtext/features/__init__.py

# The MediaPipe wrapper lives in mediapipe_hands.py and is imported explicitly
# where a camera is involved, so these helpers stay importable without it.
from .landmark_norm import landmark_features, hand_bounding_box, BBox

__all__ = [
    "landmark_features",
    "hand_bounding_box",
    "BBox",
]
