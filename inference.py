from __future__ import annotations
import argparse, logging
from pathlib import Path

from signtext.config import load_config, build_stabilizer_configs, initial_mode
from signtext.realtime import RecognitionController, CameraFacing
from signtext.realtime.recognizer import FrameRecognizer
from signtext.realtime.webcam_loop import WebcamSignLoop, LoopConfig

LOGGER = logging.getLogger("inference")


def build_recognizer(cfg: dict):
    """Detector + classifier, or None when either cannot be loaded."""
    from signtext.models import build_classifier

    try:
        from signtext.features.mediapipe_hands import HandsWrapper
    except RuntimeError as e:
        LOGGER.error("Hand detector unavailable: %s", e)
        return None

    det = cfg.get("detector") or {}
    try:
        classifier = build_classifier(cfg.get("classifier") or {})
    except (OSError, ValueError) as e:
        LOGGER.error("Classifier unavailable: %s", e)
        return None
    hands = HandsWrapper(
        max_num_hands=1,
        min_detection_confidence=float(det.get("min_detection_confidence", 0.5)),
        min_tracking_confidence=float(det.get("min_tracking_confidence", 0.5)),
    )
    return FrameRecognizer(hands, classifier, bbox_padding=int(det.get("bbox_padding", 25)))


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", type=str, required=True)
    ap.add_argument("--facing", choices=[f.value for f in CameraFacing], default=CameraFacing.FRONT.value)
    ap.add_argument("--model-dir", type=str, default=None, help="Override classifier.model_dir")
    ap.add_argument("--log-level", type=str, default="INFO")
    ap.add_argument("--no-window", action="store_true", help="Run without the preview window")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    cfg = load_config(Path(args.config))
    if args.model_dir is not None:
        cfg.setdefault("classifier", {})["model_dir"] = args.model_dir

    rt = cfg.get("realtime") or {}
    loop_cfg = LoopConfig(
        front_camera_index=int(rt.get("front_camera_index", 0)),
        back_camera_index=int(rt.get("back_camera_index", 1)),
        target_fps=int(rt.get("target_fps", 30)),
        mirror_input=bool(rt.get("mirror_input", True)),
    )

    controller = RecognitionController(
        configs=build_stabilizer_configs(cfg),
        mode=initial_mode(cfg),
        facing=CameraFacing(args.facing),
    )
    controller.add_listener(lambda event, snap: LOGGER.info("%s -> '%s'", event.kind.value, snap.text))

    loop = WebcamSignLoop(controller, build_recognizer(cfg), loop_cfg)
    loop.run(show_debug=not args.no_window)


if __name__ == "__main__":
    main()
