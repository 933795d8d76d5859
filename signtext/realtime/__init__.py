from .stabilizer import Event, EventKind, Prediction, RecognitionMode, Stabilizer, StabilizerConfig, StabilizerState
from .text_buffer import TextAccumulator
from .controller import CameraFacing, RecognitionController, TranslationSnapshot
from .scheduling import LatestFrameSlot, ResultSequencer

__all__ = [
    "Event",
    "EventKind",
    "Prediction",
    "RecognitionMode",
    "Stabilizer",
    "StabilizerConfig",
    "StabilizerState",
    "TextAccumulator",
    "CameraFacing",
    "RecognitionController",
    "TranslationSnapshot",
    "LatestFrameSlot",
    "ResultSequencer",
]
