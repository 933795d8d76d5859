# signtext/config.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .realtime.stabilizer import RecognitionMode, StabilizerConfig

logger = logging.getLogger(__name__)


def load_config(path: Path | str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    return cfg


def _stabilizer_config(section: Dict[str, Any], defaults: StabilizerConfig) -> StabilizerConfig:
    # StabilizerConfig validates ranges and raises ValueError
    return StabilizerConfig(
        confidence_threshold=float(section.get("confidence_threshold", defaults.confidence_threshold)),
        stability_time_ms=float(section.get("stability_time_ms", defaults.stability_time_ms)),
        stability_frames=int(section.get("stability_frames", defaults.stability_frames)),
        same_symbol_cooldown_ms=float(section.get("same_symbol_cooldown_ms", defaults.same_symbol_cooldown_ms)),
        word_separator_delay_ms=float(section.get("word_separator_delay_ms", defaults.word_separator_delay_ms)),
    )


def build_stabilizer_configs(cfg: dict) -> Dict[RecognitionMode, StabilizerConfig]:
    """Per-mode stabilizer settings from the `letter` / `phrase` sections; missing keys use defaults."""
    configs = {
        RecognitionMode.LETTER: _stabilizer_config(cfg.get("letter") or {}, StabilizerConfig.letter_defaults()),
        RecognitionMode.PHRASE: _stabilizer_config(cfg.get("phrase") or {}, StabilizerConfig.phrase_defaults()),
    }
    for mode, c in configs.items():
        logger.info("%s: threshold=%.2f stability=%s cooldown=%.0fms separator=%.0fms",
                    mode.value, c.confidence_threshold,
                    f"{c.stability_time_ms:.0f}ms" if mode is RecognitionMode.LETTER else f"{c.stability_frames} frames",
                    c.same_symbol_cooldown_ms, c.word_separator_delay_ms)
    return configs


def initial_mode(cfg: dict) -> RecognitionMode:
    value = str((cfg.get("realtime") or {}).get("initial_mode", "letter")).lower()
    try:
        return RecognitionMode(value)
    except ValueError:
        raise ValueError(f"realtime.initial_mode must be 'letter' or 'phrase', got '{value}'") from None
