# signtext/models/classical.py
from __future__ import annotations

import json
import logging
import pickle
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import numpy as np
import sklearn

from ..features.crop import preprocess_crop
from ..features.landmark_norm import BBox, FEATURE_SIZE, landmark_features
from ..realtime.stabilizer import Prediction

logger = logging.getLogger(__name__)

# 26 letters; digits and phrase vocabularies come from metadata.json
CANONICAL_LETTERS = [chr(c) for c in range(ord("A"), ord("Z") + 1)]
MODEL_KINDS = ("landmark", "image")


@dataclass
class ClassicalModel:
    clf: Any
    classes: List[str]
    kind: str = "landmark"
    input_size: int = FEATURE_SIZE

    # ---------- Load ----------
    @staticmethod
    def load(model_dir: Path) -> "ClassicalModel":
        model_dir = Path(model_dir)
        with open(model_dir / "model.pkl", "rb") as f:
            clf = pickle.load(f)
        with open(model_dir / "metadata.json", "r", encoding="utf-8") as f:
            meta = json.load(f)
        classes = list(meta.get("classes", CANONICAL_LETTERS))
        kind = meta.get("kind", "landmark")
        if kind not in MODEL_KINDS:
            raise ValueError(f"Unknown model kind '{kind}' in {model_dir}")
        input_size = int(meta.get("input_size", FEATURE_SIZE))
        meta_ver = meta.get("sklearn_version")
        if meta_ver and meta_ver != sklearn.__version__:
            logger.warning(
                "sklearn version mismatch: trained with %s, current %s. Proceeding anyway.",
                meta_ver, sklearn.__version__,
            )
        logger.info("Loaded %s model with %d classes from %s", kind, len(classes), model_dir)
        return ClassicalModel(clf=clf, classes=classes, kind=kind, input_size=input_size)

    # ---------- Predict ----------
    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return self.clf.predict_proba(X)

    def top_prediction(self, x: np.ndarray) -> Prediction:
        x = np.asarray(x, dtype=np.float32).reshape(1, -1)
        if x.shape[1] != self.input_size:
            raise ValueError(f"Expected {self.input_size} features, got {x.shape[1]}")
        probs = self.predict_proba(x)[0]
        labels = getattr(self.clf, "classes_", np.arange(len(probs)))
        best = int(np.argmax(probs))
        symbol = self._symbol_for(labels[best])

        if logger.isEnabledFor(logging.DEBUG):
            top3 = np.argsort(probs)[::-1][:3]
            logger.debug("Prediction: %s (%.2f) | Top3: %s", symbol, float(probs[best]),
                         ", ".join(f"{self._symbol_for(labels[i])}:{probs[i]:.2f}" for i in top3))
        return Prediction(symbol=symbol, confidence=float(probs[best]))

    def _symbol_for(self, label: Any) -> str:
        # integer labels index into self.classes; string labels are the symbol itself
        if isinstance(label, (int, np.integer)) and not isinstance(label, bool):
            idx = int(label)
            return self.classes[idx] if 0 <= idx < len(self.classes) else "?"
        return str(label)


class SymbolClassifier(Protocol):
    def classify(self, landmarks: np.ndarray, frame: np.ndarray, bbox: BBox) -> Optional[Prediction]:
        ...


class LandmarkClassifier:
    """Classifies the 42 wrist-relative landmark coordinates."""

    def __init__(self, model: ClassicalModel):
        self.model = model

    def classify(self, landmarks: np.ndarray, frame: np.ndarray, bbox: BBox) -> Optional[Prediction]:
        return self.model.top_prediction(landmark_features(landmarks))


class ImageClassifier:
    """Classifies the grayscale hand crop, flattened to size*size pixels."""

    def __init__(self, model: ClassicalModel):
        self.model = model
        self.size = int(round(float(np.sqrt(model.input_size))))
        if self.size * self.size != model.input_size:
            raise ValueError(f"Image model input_size {model.input_size} is not a square")

    def classify(self, landmarks: np.ndarray, frame: np.ndarray, bbox: BBox) -> Optional[Prediction]:
        pixels = preprocess_crop(frame, bbox, size=self.size)
        return self.model.top_prediction(pixels.reshape(-1))


def build_classifier(cfg: Dict[str, Any]) -> SymbolClassifier:
    """Pick the classifier variant from the `classifier` config section and the stored model kind."""
    model = ClassicalModel.load(Path(cfg.get("model_dir", "outputs/model")))
    kind = cfg.get("kind", model.kind)
    if kind != model.kind:
        raise ValueError(f"Config asks for a '{kind}' classifier but the model is '{model.kind}'")
    if kind == "image":
        return ImageClassifier(model)
    return LandmarkClassifier(model)
