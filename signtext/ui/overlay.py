from __future__ import annotations

import cv2
import numpy as np

from ..realtime.controller import TranslationSnapshot


def draw_hud(frame_bgr: np.ndarray, snap: TranslationSnapshot) -> None:
    h, w = frame_bgr.shape[:2]

    pred = snap.current_prediction
    if pred is not None and pred.bbox is not None:
        left, top, right, bottom = pred.bbox
        cv2.rectangle(frame_bgr, (left, top), (right, bottom), (0, 255, 0), 2)
        cv2.putText(frame_bgr, f"{pred.symbol} {int(pred.confidence * 100)}%", (left, max(20, top - 8)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2, cv2.LINE_AA)

    header = f"{snap.mode.value.upper()} | {snap.facing.value}"
    cv2.rectangle(frame_bgr, (10, 10), (max(200, 20 + 10 * len(header)), 45), (0, 0, 0), -1)
    cv2.putText(frame_bgr, header, (20, 35), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2, cv2.LINE_AA)

    # translated text, last characters only when too long for the frame
    max_chars = max(10, (w - 40) // 16)
    text = snap.text[-max_chars:]
    cv2.rectangle(frame_bgr, (10, h - 60), (w - 10, h - 10), (0, 0, 0), -1)
    cv2.putText(frame_bgr, text or "...", (20, h - 25), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 255, 0), 2, cv2.LINE_AA)

    if snap.degraded_reason:
        cv2.putText(frame_bgr, snap.degraded_reason[:60], (20, 75), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                    (0, 0, 255), 2, cv2.LINE_AA)
