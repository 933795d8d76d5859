from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from ..ui import draw_hud
from .controller import CameraFacing, RecognitionController
from .recognizer import FrameRecognizer
from .scheduling import LatestFrameSlot, ResultSequencer

LOGGER = logging.getLogger(__name__)

KEY_ESC = 27
KEY_BACKSPACE = 8
KEY_DELETE_ALT = 127  # backspace on macOS terminals

FrameItem = Tuple[np.ndarray, float, int]  # frame, timestamp ms, controller generation


@dataclass
class LoopConfig:
    front_camera_index: int = 0
    back_camera_index: int = 1
    target_fps: int = 30
    mirror_input: bool = True


class WebcamSignLoop:
    """
    Camera -> recognizer -> controller, on three threads:

      capture:     reads frames and offers them to a keep-latest slot
      recognition: takes the newest frame, runs detection + classification
                   and feeds the result to the controller in timestamp order
      main:        draws the HUD and handles keys

    Frames the recognizer could not keep up with are overwritten in the slot.
    """

    def __init__(self, controller: RecognitionController, recognizer: Optional[FrameRecognizer],
                 loop_cfg: LoopConfig):
        self.cfg = loop_cfg
        self.controller = controller
        self.recognizer = recognizer
        self._frames: LatestFrameSlot[FrameItem] = LatestFrameSlot()
        self._preview: LatestFrameSlot[np.ndarray] = LatestFrameSlot()
        self._sequencer: ResultSequencer = ResultSequencer()
        self._stop = threading.Event()
        self._reopen = threading.Event()
        if recognizer is None:
            controller.mark_degraded("Recognition models unavailable - nothing will be recognized")

    def _camera_index(self) -> int:
        if self.controller.facing is CameraFacing.BACK:
            return self.cfg.back_camera_index
        return self.cfg.front_camera_index

    def _open_capture(self) -> Optional[cv2.VideoCapture]:
        idx = self._camera_index()
        cap = cv2.VideoCapture(idx)
        if not cap.isOpened():
            LOGGER.error("Failed to open camera index %s", idx)
            cap.release()
            return None
        LOGGER.info("Opened camera index %s (%s)", idx, self.controller.facing.value)
        return cap

    # ---------- threads ----------
    def _capture_worker(self) -> None:
        target_delay = 1.0 / max(1, self.cfg.target_fps)
        cap = self._open_capture()
        try:
            while not self._stop.is_set():
                if self._reopen.is_set():
                    self._reopen.clear()
                    if cap is not None:
                        cap.release()
                    cap = self._open_capture()
                if cap is None:
                    self._stop.wait(0.5)
                    continue

                t_start = time.monotonic()
                ret, frame = cap.read()
                if not ret:
                    LOGGER.warning("Camera returned no frame")
                    self._stop.wait(0.1)
                    continue
                # the back camera is not mirrored
                if self.cfg.mirror_input and self.controller.facing is CameraFacing.FRONT:
                    frame = cv2.flip(frame, 1)

                now_ms = time.monotonic() * 1000.0
                self._frames.offer((frame, now_ms, self.controller.generation))
                self._preview.offer(frame)

                delay = target_delay - (time.monotonic() - t_start)
                if delay > 0:
                    self._stop.wait(delay)
        finally:
            if cap is not None:
                cap.release()
            self._frames.close()
            self._preview.close()

    def _recognition_worker(self) -> None:
        while not self._stop.is_set():
            item = self._frames.take(timeout=0.2)
            if item is None:
                if self._frames.closed:
                    break
                continue
            frame, now_ms, generation = item
            pred = None
            if self.recognizer is not None:
                try:
                    pred = self.recognizer.recognize(frame)
                except Exception:
                    LOGGER.exception("Recognition failed at %.1f ms; treating the frame as no hand", now_ms)
                    pred = None
            accepted = self._sequencer.accept(now_ms, pred)
            if accepted is None:
                continue
            try:
                self.controller.process_frame(pred, now_ms, generation=generation)
            except Exception:
                LOGGER.exception("Failed to apply frame at %.1f ms", now_ms)
        LOGGER.info("Recognition worker stopped (frames dropped by slot: %d, late results: %d)",
                    self._frames.dropped, self._sequencer.dropped)

    # ---------- keys ----------
    def handle_key(self, key: int) -> bool:
        """Apply one key press; returns False when the loop should stop."""
        if key == KEY_ESC:
            return False
        if key in (ord("m"), ord("M")):
            self.controller.toggle_mode()
        elif key in (ord("f"), ord("F")):
            self.controller.toggle_facing()
            self._reopen.set()
        elif key in (ord("c"), ord("C")):
            self.controller.clear()
        elif key in (ord("d"), ord("D"), KEY_BACKSPACE, KEY_DELETE_ALT):
            self.controller.delete_last()
        return True

    def run(self, show_debug: bool = True) -> None:
        capture = threading.Thread(target=self._capture_worker, name="capture", daemon=True)
        recognition = threading.Thread(target=self._recognition_worker, name="recognition", daemon=True)
        capture.start()
        recognition.start()
        try:
            while not self._stop.is_set():
                frame = self._preview.take(timeout=0.5)
                if frame is None:
                    if self._preview.closed:
                        break
                    continue
                if not show_debug:
                    continue
                draw_hud(frame, self.controller.snapshot())
                cv2.imshow("Sign to Text", frame)
                key = cv2.waitKey(1) & 0xFF
                if key != 0xFF and not self.handle_key(key):
                    break
        finally:
            self._stop.set()
            self._frames.close()
            self._preview.close()
            capture.join(timeout=1.0)
            recognition.join(timeout=1.0)
            cv2.destroyAllWindows()
            if self.recognizer is not None:
                self.recognizer.close()
            LOGGER.info("Final text: '%s'", self.controller.snapshot().text)
