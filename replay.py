from __future__ import annotations
import argparse, logging
from pathlib import Path

from signtext.config import load_config, build_stabilizer_configs, initial_mode
from signtext.dataio import load_prediction_log, replay
from signtext.realtime import RecognitionController

log = logging.getLogger("replay")


def main():
    ap = argparse.ArgumentParser(description="Replay a prediction log through the stabilizer")
    ap.add_argument("--config", type=str, required=True)
    ap.add_argument("--log", type=str, required=True, help="CSV with timestamp_ms,symbol,confidence[,action]")
    ap.add_argument("--log-level", type=str, default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    cfg = load_config(Path(args.config))
    controller = RecognitionController(configs=build_stabilizer_configs(cfg), mode=initial_mode(cfg))
    frames = load_prediction_log(Path(args.log))
    events = replay(frames, controller)

    for ev in events:
        print(f"{ev.kind.value}\t{ev.text!r}")
    print(f"text\t{controller.snapshot().text!r}")


if __name__ == "__main__":
    main()
