from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from .stabilizer import Event, Prediction, RecognitionMode, Stabilizer, StabilizerConfig, validate_prediction
from .text_buffer import TextAccumulator

LOGGER = logging.getLogger(__name__)


class CameraFacing(str, Enum):
    FRONT = "front"
    BACK = "back"

    def toggled(self) -> "CameraFacing":
        return CameraFacing.BACK if self is CameraFacing.FRONT else CameraFacing.FRONT


@dataclass(frozen=True)
class TranslationSnapshot:
    """Read-only view handed to the display layer."""
    text: str
    committed: str
    current_word: str
    mode: RecognitionMode
    facing: CameraFacing
    current_prediction: Optional[Prediction] = None
    degraded_reason: Optional[str] = None
    generation: int = 0


EventListener = Callable[[Event, TranslationSnapshot], None]


class RecognitionController:
    """
    Owns mode, camera facing, the stabilizer and the text buffer.

    Every public method takes the same lock, so a mode switch, clear or
    delete is observed as one transition. Each of those bumps `generation`;
    results tagged with an older generation are discarded by
    `process_frame`.
    """

    def __init__(self, configs: Optional[Dict[RecognitionMode, StabilizerConfig]] = None,
                 mode: RecognitionMode = RecognitionMode.LETTER,
                 facing: CameraFacing = CameraFacing.FRONT):
        configs = configs or {}
        self._lock = threading.RLock()
        self._mode = RecognitionMode(mode)
        self._facing = CameraFacing(facing)
        self._stabilizer = Stabilizer(
            letter_config=configs.get(RecognitionMode.LETTER),
            phrase_config=configs.get(RecognitionMode.PHRASE),
            mode=self._mode,
        )
        self._text = TextAccumulator()
        self._current_prediction: Optional[Prediction] = None
        self._degraded_reason: Optional[str] = None
        self._generation = 0
        self._listeners: List[EventListener] = []

    # ---------- read side ----------
    @property
    def mode(self) -> RecognitionMode:
        return self._mode

    @property
    def facing(self) -> CameraFacing:
        return self._facing

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def stabilizer(self) -> Stabilizer:
        return self._stabilizer

    def snapshot(self) -> TranslationSnapshot:
        with self._lock:
            return TranslationSnapshot(
                text=self._text.text,
                committed=self._text.committed,
                current_word=self._text.current_word,
                mode=self._mode,
                facing=self._facing,
                current_prediction=self._current_prediction,
                degraded_reason=self._degraded_reason,
                generation=self._generation,
            )

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    # ---------- per-frame ----------
    def process_frame(self, prediction: Optional[Prediction], now: float,
                      generation: Optional[int] = None) -> Optional[Event]:
        with self._lock:
            if generation is not None and generation != self._generation:
                LOGGER.debug("Discarding result from generation %d (current %d)", generation, self._generation)
                return None
            self._current_prediction = validate_prediction(prediction)
            event = self._stabilizer.process(
                prediction, now, mode=self._mode, word_open=self._text.accepts_word_break()
            )
            if event is None:
                return None
            self._text.apply(event)
            snap = self.snapshot()
        for listener in list(self._listeners):
            listener(event, snap)
        return event

    # ---------- user controls ----------
    def _reset_locked(self) -> None:
        self._stabilizer.reset(self._mode)
        self._current_prediction = None
        self._generation += 1

    def toggle_mode(self) -> RecognitionMode:
        with self._lock:
            self._mode = self._mode.toggled()
            self._text.clear()
            self._reset_locked()
            LOGGER.info("Recognition mode -> %s", self._mode.value)
            return self._mode

    def toggle_facing(self) -> CameraFacing:
        with self._lock:
            self._facing = self._facing.toggled()
            LOGGER.info("Camera facing -> %s", self._facing.value)
            return self._facing

    def clear(self) -> None:
        with self._lock:
            self._text.clear()
            self._reset_locked()
            LOGGER.info("Text cleared")

    def delete_last(self) -> Optional[str]:
        with self._lock:
            removed = self._text.delete_last()
            self._reset_locked()
            LOGGER.info("Deleted %r, text now '%s'", removed, self._text.text)
            return removed

    def mark_degraded(self, reason: str) -> None:
        """Signal that no predictions will arrive (detector/classifier unavailable)."""
        with self._lock:
            if self._degraded_reason is None:
                LOGGER.warning("Recognition degraded: %s", reason)
            self._degraded_reason = reason
