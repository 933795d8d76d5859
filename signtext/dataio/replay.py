# signtext/dataio/replay.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from ..realtime.controller import RecognitionController
from ..realtime.stabilizer import Event, Prediction
from .csv_utils import detect_delimiter, find_column

logger = logging.getLogger(__name__)

ACTIONS = ("toggle_mode", "toggle_facing", "clear", "delete_last")


@dataclass(frozen=True)
class LoggedFrame:
    """One row of a prediction log: a frame result and/or a user action."""
    timestamp_ms: float
    prediction: Optional[Prediction] = None
    action: Optional[str] = None


def load_prediction_log(path: Path | str) -> List[LoggedFrame]:
    """
    Read a prediction log. Columns: timestamp_ms, symbol, confidence and an
    optional action. A blank symbol means no hand in that frame, except on
    an action row, where it means the row carries only the action.
    """
    p = Path(path)
    delim = detect_delimiter(p)
    df = pd.read_csv(p, sep=delim, dtype=str, keep_default_na=False, encoding="utf-8-sig")

    ts_col = find_column(df.columns, "timestamp_ms", "timestamp", "t", "now")
    sym_col = find_column(df.columns, "symbol", "label", "prediction")
    conf_col = find_column(df.columns, "confidence", "conf", "score")
    act_col = find_column(df.columns, "action")
    if ts_col is None or sym_col is None:
        raise ValueError(f"{p}: need timestamp_ms and symbol columns, got {list(df.columns)}")

    frames: List[LoggedFrame] = []
    for i, row in df.iterrows():
        try:
            ts = float(row[ts_col])
        except ValueError:
            raise ValueError(f"{p}: row {i} has a bad timestamp {row[ts_col]!r}") from None

        action = row[act_col].strip().lower() if act_col is not None else ""
        if action and action not in ACTIONS:
            raise ValueError(f"{p}: row {i} has unknown action {action!r}")

        symbol = row[sym_col].strip()
        pred = None
        if symbol:
            raw_conf = row[conf_col].strip() if conf_col is not None else ""
            try:
                conf = float(raw_conf) if raw_conf else 1.0
            except ValueError:
                # kept as a malformed frame; the stabilizer treats it as no prediction
                conf = float("nan")
            pred = Prediction(symbol=symbol, confidence=conf)

        frames.append(LoggedFrame(timestamp_ms=ts, prediction=pred, action=action or None))

    logger.info("Loaded %d frames from %s", len(frames), p)
    return frames


def replay(frames: Iterable[LoggedFrame], controller: RecognitionController) -> List[Event]:
    """Feed logged frames through the controller in order and collect the emitted events."""
    events: List[Event] = []
    for fr in frames:
        if fr.action is not None:
            getattr(controller, fr.action)()
            if fr.prediction is None:
                continue
        event = controller.process_frame(fr.prediction, fr.timestamp_ms)
        if event is not None:
            events.append(event)
    return events
