from __future__ import annotations

import hashlib
import math
import os
import random
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from .connectivity import validate_density
from .errors import ConfigurationError

SEED_MAX_INT = 9223372036854775807

# env var -> (attribute, parser)
_ENV_MAP = {
    "ROOMGRID_ROWS": ("rows", int),
    "ROOMGRID_COLUMNS": ("columns", int),
    "ROOMGRID_SPACING": ("spacing", float),
    "ROOMGRID_DENSITY": ("density", float),
    "ROOMGRID_LAYOUT_COUNT": ("layout_count", int),
}

_APP_CONFIG_MAP = {
    "LAYOUT_ROWS": "rows",
    "LAYOUT_COLUMNS": "columns",
    "LAYOUT_SPACING": "spacing",
    "LAYOUT_DENSITY": "density",
    "LAYOUT_COUNT": "layout_count",
    "LAYOUT_SEED": "seed",
}


@dataclass
class LayoutConfig:
    rows: int = 3
    columns: int = 3
    spacing: float = 20.0
    density: float = 0.05
    layout_count: int = 3
    seed: Optional[int] = None
    origin: Tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))

    def validate(self) -> "LayoutConfig":
        """Raise ConfigurationError for the first invalid field; return self otherwise."""
        _require_positive_int("rows", self.rows)
        _require_positive_int("columns", self.columns)
        _require_positive_int("layout_count", self.layout_count)
        validate_density(self.density)
        if not _is_number(self.spacing) or not math.isfinite(self.spacing):
            raise ConfigurationError("spacing", "must be a finite number")
        if len(self.origin) != 3 or not all(_is_number(v) for v in self.origin):
            raise ConfigurationError("origin", "must be three numbers")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigurationError("seed", "must be an integer or null")
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LayoutConfig":
        if environ is None:
            environ = os.environ
        cfg = cls()
        for env_key, (attr, parser) in _ENV_MAP.items():
            raw = environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                setattr(cfg, attr, parser(raw.strip()))
            except ValueError:
                raise ConfigurationError(env_key, f"cannot parse {raw!r}") from None
        raw_seed = environ.get("ROOMGRID_SEED")
        if raw_seed is not None and raw_seed.strip():
            cfg.seed = coerce_seed(raw_seed)
        return cfg

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "LayoutConfig":
        """Build from a Flask ``app.config``-style mapping (``LAYOUT_*`` keys)."""
        cfg = cls()
        for key, attr in _APP_CONFIG_MAP.items():
            if mapping.get(key) is not None:
                setattr(cfg, attr, mapping[key])
        if mapping.get("LAYOUT_ORIGIN") is not None:
            cfg.origin = tuple(mapping["LAYOUT_ORIGIN"])
        return cfg


def coerce_seed(value: Any) -> int:
    """Convert a provided seed (int or str) into a bounded 64-bit signed int.

    None or an empty string yields a fresh random seed. Non-numeric strings are
    hashed so the same phrase always produces the same layouts.
    """
    if value is None:
        return random.randint(1, 1_000_000)
    if isinstance(value, bool):
        raise ConfigurationError("seed", "must be an integer or string")
    if isinstance(value, int):
        return value % SEED_MAX_INT
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX_INT
    raise ConfigurationError("seed", "must be an integer or string")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(name, "must be an integer")
    if value <= 0:
        raise ConfigurationError(name, "must be >= 1")


__all__ = ["LayoutConfig", "coerce_seed", "SEED_MAX_INT"]
