from __future__ import annotations

import logging
import math
import numbers
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Deque, Optional, Tuple

LOGGER = logging.getLogger(__name__)


class RecognitionMode(str, Enum):
    LETTER = "letter"
    PHRASE = "phrase"

    def toggled(self) -> "RecognitionMode":
        return RecognitionMode.PHRASE if self is RecognitionMode.LETTER else RecognitionMode.LETTER


@dataclass(frozen=True)
class Prediction:
    """One classifier output for one processed frame."""
    symbol: str
    confidence: float
    bbox: Optional[Tuple[int, int, int, int]] = None  # (left, top, right, bottom) in pixels, informational


class EventKind(str, Enum):
    SYMBOL = "symbol"
    PHRASE = "phrase"
    WORD_BREAK = "word_break"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    text: str = ""

    @staticmethod
    def symbol(s: str) -> "Event":
        return Event(EventKind.SYMBOL, s)

    @staticmethod
    def phrase(s: str) -> "Event":
        return Event(EventKind.PHRASE, s)

    @staticmethod
    def word_break() -> "Event":
        return Event(EventKind.WORD_BREAK, " ")


@dataclass(frozen=True)
class StabilizerConfig:
    confidence_threshold: float = 0.55
    stability_time_ms: float = 500.0   # letter mode: how long a symbol must persist
    stability_frames: int = 8          # phrase mode: how many consecutive frames must agree
    same_symbol_cooldown_ms: float = 800.0
    word_separator_delay_ms: float = 3000.0

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.confidence_threshold) <= 1.0:
            raise ValueError(f"confidence_threshold must be in [0,1], got {self.confidence_threshold}")
        if int(self.stability_frames) < 1:
            raise ValueError(f"stability_frames must be >= 1, got {self.stability_frames}")
        for name in ("stability_time_ms", "same_symbol_cooldown_ms", "word_separator_delay_ms"):
            if float(getattr(self, name)) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @staticmethod
    def letter_defaults() -> "StabilizerConfig":
        return StabilizerConfig(
            confidence_threshold=0.55,
            stability_time_ms=500.0,
            same_symbol_cooldown_ms=800.0,
            word_separator_delay_ms=3000.0,
        )

    @staticmethod
    def phrase_defaults() -> "StabilizerConfig":
        return StabilizerConfig(
            confidence_threshold=0.50,
            stability_frames=8,
            same_symbol_cooldown_ms=1500.0,
            word_separator_delay_ms=3000.0,
        )


@dataclass
class StabilizerState:
    capacity: int = 8
    # letter mode: time-based tracking run
    current_stable_symbol: Optional[str] = None
    stable_since: Optional[float] = None
    # phrase mode: frame window
    recent_window: Deque[str] = field(default_factory=deque)
    # de-duplication
    last_confirmed_symbol: Optional[str] = None
    last_confirmed_at: Optional[float] = None
    # word separator timer
    last_subject_seen_at: Optional[float] = None
    last_frame_at: Optional[float] = None

    def __post_init__(self) -> None:
        self.recent_window = deque(self.recent_window, maxlen=self.capacity)

    def is_empty(self) -> bool:
        return (
            self.current_stable_symbol is None
            and self.stable_since is None
            and not self.recent_window
            and self.last_confirmed_symbol is None
            and self.last_confirmed_at is None
            and self.last_subject_seen_at is None
        )

    def abort_tracking(self) -> None:
        self.current_stable_symbol = None
        self.stable_since = None


def validate_prediction(prediction: object) -> Optional[Prediction]:
    """Return the prediction with a float confidence if it is well formed, otherwise None."""
    if prediction is None or not isinstance(prediction, Prediction):
        return None
    if not isinstance(prediction.symbol, str) or not prediction.symbol.strip():
        return None
    if isinstance(prediction.confidence, bool) or not isinstance(prediction.confidence, numbers.Real):
        return None
    conf = float(prediction.confidence)
    if not math.isfinite(conf) or conf < 0.0 or conf > 1.0:
        return None
    return replace(prediction, confidence=conf)


class Stabilizer:
    """
    Turns noisy per-frame predictions into confirmed symbols and phrases.

    Letter mode confirms a symbol once it has been predicted above threshold
    for `stability_time_ms`; phrase mode confirms once the last
    `stability_frames` predictions agree. Both share the same de-duplication
    rule: a confirmation is accepted when the symbol differs from the last
    confirmed one, or when the same-symbol cooldown has elapsed.

    Must be fed one frame at a time in non-decreasing `now` order (ms).
    The caller serializes access; there is no locking here.
    """

    def __init__(self, letter_config: Optional[StabilizerConfig] = None,
                 phrase_config: Optional[StabilizerConfig] = None,
                 mode: RecognitionMode = RecognitionMode.LETTER):
        self.configs = {
            RecognitionMode.LETTER: letter_config or StabilizerConfig.letter_defaults(),
            RecognitionMode.PHRASE: phrase_config or StabilizerConfig.phrase_defaults(),
        }
        self.mode = RecognitionMode(mode)
        self.state = self._fresh_state(self.mode)

    @property
    def config(self) -> StabilizerConfig:
        return self.configs[self.mode]

    def _fresh_state(self, mode: RecognitionMode) -> StabilizerState:
        return StabilizerState(capacity=int(self.configs[mode].stability_frames))

    def reset(self, mode: Optional[RecognitionMode] = None) -> None:
        """Drop all tracking and de-duplication state. Never emits."""
        if mode is not None:
            self.mode = RecognitionMode(mode)
        self.state = self._fresh_state(self.mode)
        LOGGER.debug("Stabilizer reset (mode=%s)", self.mode.value)

    def process(self, prediction: Optional[Prediction], now: float,
                mode: Optional[RecognitionMode] = None, word_open: bool = False) -> Optional[Event]:
        """
        Consume one frame. `word_open` tells the letter policy whether the
        text buffer holds a pending word that a WordBreak would close.
        """
        if mode is not None and mode != self.mode:
            LOGGER.info("Mode changed %s -> %s, resetting stabilizer", self.mode.value, RecognitionMode(mode).value)
            self.reset(mode)

        st = self.state
        try:
            now = float(now)
        except (TypeError, ValueError):
            LOGGER.warning("Dropping frame with non-numeric timestamp %r", now)
            return None
        if not math.isfinite(now):
            LOGGER.warning("Dropping frame with non-finite timestamp")
            return None
        if st.last_frame_at is not None and now < st.last_frame_at:
            LOGGER.warning("Dropping out-of-order frame: now=%.1f < last=%.1f", now, st.last_frame_at)
            return None
        st.last_frame_at = now

        pred = validate_prediction(prediction)
        if prediction is not None and pred is None:
            LOGGER.debug("Rejected malformed prediction %r", prediction)

        if self.mode is RecognitionMode.LETTER:
            return self._process_letter(pred, now, word_open)
        return self._process_phrase(pred, now)

    # ---------- de-duplication ----------
    def _accepts(self, symbol: str, now: float) -> bool:
        st = self.state
        if symbol != st.last_confirmed_symbol or st.last_confirmed_at is None:
            return True
        return (now - st.last_confirmed_at) > self.config.same_symbol_cooldown_ms

    def _mark_confirmed(self, symbol: str, now: float) -> None:
        self.state.last_confirmed_symbol = symbol
        self.state.last_confirmed_at = now

    # ---------- letter policy ----------
    def _process_letter(self, pred: Optional[Prediction], now: float, word_open: bool) -> Optional[Event]:
        cfg = self.config
        st = self.state

        if pred is not None:
            st.last_subject_seen_at = now

        if pred is None or pred.confidence <= cfg.confidence_threshold:
            if st.current_stable_symbol is not None:
                LOGGER.debug("Tracking lost for '%s'", st.current_stable_symbol)
                st.abort_tracking()
            if pred is None:
                return self._maybe_word_break(now, word_open)
            return None

        symbol = pred.symbol
        if symbol != st.current_stable_symbol:
            st.current_stable_symbol = symbol
            st.stable_since = now
            LOGGER.debug("Tracking '%s' since %.1f", symbol, now)
            return None

        if now - st.stable_since < cfg.stability_time_ms:
            return None

        if not self._accepts(symbol, now):
            LOGGER.debug("'%s' held but still in cooldown", symbol)
            return None

        self._mark_confirmed(symbol, now)
        st.abort_tracking()
        LOGGER.info("Letter confirmed: '%s' at %.1f", symbol, now)
        return Event.symbol(symbol)

    def _maybe_word_break(self, now: float, word_open: bool) -> Optional[Event]:
        st = self.state
        if st.last_subject_seen_at is None or not word_open:
            return None
        if now - st.last_subject_seen_at <= self.config.word_separator_delay_ms:
            return None
        st.last_subject_seen_at = None
        LOGGER.info("Word break at %.1f", now)
        return Event.word_break()

    # ---------- phrase policy ----------
    def _process_phrase(self, pred: Optional[Prediction], now: float) -> Optional[Event]:
        cfg = self.config
        st = self.state

        if pred is not None:
            st.last_subject_seen_at = now

        if pred is None or pred.confidence <= cfg.confidence_threshold:
            if st.recent_window:
                LOGGER.debug("Phrase window cleared (%d frames)", len(st.recent_window))
                st.recent_window.clear()
            return None

        st.recent_window.append(pred.symbol)
        if len(st.recent_window) < st.recent_window.maxlen:
            return None
        if len(set(st.recent_window)) != 1:
            return None

        symbol = st.recent_window[0]
        if not self._accepts(symbol, now):
            LOGGER.debug("Phrase '%s' held but still in cooldown", symbol)
            return None

        self._mark_confirmed(symbol, now)
        st.recent_window.clear()
        LOGGER.info("Phrase confirmed: '%s' at %.1f", symbol, now)
        return Event.phrase(symbol)
