"""
Engine configuration.

The defaults reproduce the editor's fixed layout constants. A JSON file can
override any of them (see load_config); unknown keys are rejected so typos
do not silently fall back to defaults.
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Tuple, Union
import json

from .geometry import Margins

DEFAULT_PALETTE: Tuple[str, ...] = (
    "#FFE066",
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FECA57",
)

MAX_SECTIONS = 4
MIN_ZOOM = 0.1
MAX_ZOOM = 5.0


@dataclass(frozen=True)
class EngineConfig:
    """Tunable constants for placement, item sizing and debouncing."""

    margins: Margins = field(default_factory=Margins)
    grid_step: float = 20
    default_item_width: float = 200
    default_item_height: float = 150
    min_item_width: float = 100
    min_item_height: float = 80
    debounce_seconds: float = 0.1
    palette: Tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self):
        if self.grid_step <= 0:
            raise ValueError(f"grid_step must be positive, got {self.grid_step}")
        if self.grid_step >= min(self.min_item_width, self.min_item_height):
            raise ValueError(
                f"grid_step ({self.grid_step}) must be smaller than the minimum "
                f"item dimension ({min(self.min_item_width, self.min_item_height)})"
            )
        if not self.palette:
            raise ValueError("palette must contain at least one color")


DEFAULT_CONFIG = EngineConfig()


def config_from_dict(data: Dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from a JSON-style dict of overrides."""
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")

    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")

    overrides: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "margins":
            if not isinstance(value, dict):
                raise ValueError("margins must be an object")
            margin_keys = {f.name for f in fields(Margins)}
            bad = sorted(set(value) - margin_keys)
            if bad:
                raise ValueError(f"Unknown margin keys: {bad}")
            overrides[key] = replace(
                Margins(), **{k: float(v) for k, v in value.items()}
            )
        elif key == "palette":
            overrides[key] = tuple(str(c) for c in value)
        else:
            try:
                overrides[key] = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"{key} must be a number, got {value!r}") from None

    return replace(DEFAULT_CONFIG, **overrides)


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an EngineConfig from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from None
    return config_from_dict(data)
