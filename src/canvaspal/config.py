"""Configuration management for CanvasPal.

Loads from YAML file with environment variable expansion.
All values have sensible defaults, matching the extension's installed settings.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${ENV_VAR} references in config values."""
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")
        def replacer(match: re.Match) -> str:
            env_key = match.group(1)
            env_val = os.environ.get(env_key)
            if env_val is None:
                raise ValueError(f"Environment variable '{env_key}' not set")
            return env_val
        return pattern.sub(replacer, value)
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _as_float(data: dict, key: str, default: float) -> float:
    raw = data.get(key, default)
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Config value '{key}' must be a number, got {raw!r}") from None


_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0", "")


def _as_bool(data: dict, key: str, default: bool) -> bool:
    # ${ENV} expansion always yields strings
    raw = data.get(key, default)
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Config value '{key}' must be a boolean, got {raw!r}")
    return bool(raw)


@dataclass
class WeightConfig:
    """Relative weights of the three priority factors.

    The weights need not sum to 1; they are normalized at scoring time.
    """
    due_date: float = 0.4
    grade_weight: float = 0.3
    impact: float = 0.3

    @classmethod
    def from_dict(cls, data: dict) -> WeightConfig:
        return cls(
            due_date=_as_float(data, "due_date", 0.4),
            grade_weight=_as_float(data, "grade_weight", 0.3),
            impact=_as_float(data, "impact", 0.3),
        )


@dataclass(frozen=True)
class UrgencyBand:
    """Extra urgency granted when an item is due within ``within_hours``."""
    within_hours: float
    bonus: float

    @classmethod
    def from_dict(cls, data: dict) -> UrgencyBand:
        if "within_hours" not in data or "bonus" not in data:
            raise ValueError(f"Urgency band needs 'within_hours' and 'bonus': {data!r}")
        return cls(
            within_hours=_as_float(data, "within_hours", 0.0),
            bonus=_as_float(data, "bonus", 0.0),
        )


@dataclass
class ScoringConfig:
    """Tunable constants of the priority algorithm."""
    due_window_days: float = 10.0
    urgency_bands: list[UrgencyBand] = field(default_factory=lambda: [
        UrgencyBand(within_hours=24, bonus=0.3),
        UrgencyBand(within_hours=72, bonus=0.2),
        UrgencyBand(within_hours=168, bonus=0.1),
    ])
    default_grade_weight_factor: float = 0.4
    default_impact_factor: float = 0.5
    low_standing_cutoff: float = 70.0
    low_standing_multiplier: float = 1.5
    below_target_cutoff: float = 80.0
    below_target_multiplier: float = 1.2
    excellence_cutoff: Optional[float] = 90.0
    excellence_multiplier: float = 0.8
    peer_normalization: bool = True
    type_weights: dict[str, float] = field(default_factory=lambda: {
        "quiz": 1.2, "assignment": 1.0, "discussion": 0.8, "announcement": 0.5,
    })

    # Class-level defaults for from_dict fallback (dataclass field defaults
    # use default_factory, which is not accessible as a class attribute).
    _DEFAULT_URGENCY_BANDS = [
        {"within_hours": 24, "bonus": 0.3},
        {"within_hours": 72, "bonus": 0.2},
        {"within_hours": 168, "bonus": 0.1},
    ]
    _DEFAULT_TYPE_WEIGHTS = {
        "quiz": 1.2, "assignment": 1.0, "discussion": 0.8, "announcement": 0.5,
    }

    def __post_init__(self) -> None:
        if self.due_window_days <= 0:
            raise ValueError("due_window_days must be positive")

    @classmethod
    def from_dict(cls, data: dict) -> ScoringConfig:
        bands = [
            UrgencyBand.from_dict(band)
            for band in data.get("urgency_bands", cls._DEFAULT_URGENCY_BANDS)
        ]
        type_weights = {
            str(name).lower(): float(weight)
            for name, weight in data.get("type_weights", cls._DEFAULT_TYPE_WEIGHTS).items()
        }
        excellence = data.get("excellence_cutoff", 90.0)
        return cls(
            due_window_days=_as_float(data, "due_window_days", 10.0),
            urgency_bands=sorted(bands, key=lambda b: b.within_hours),
            default_grade_weight_factor=_as_float(data, "default_grade_weight_factor", 0.4),
            default_impact_factor=_as_float(data, "default_impact_factor", 0.5),
            low_standing_cutoff=_as_float(data, "low_standing_cutoff", 70.0),
            low_standing_multiplier=_as_float(data, "low_standing_multiplier", 1.5),
            below_target_cutoff=_as_float(data, "below_target_cutoff", 80.0),
            below_target_multiplier=_as_float(data, "below_target_multiplier", 1.2),
            excellence_cutoff=None if excellence is None else float(excellence),
            excellence_multiplier=_as_float(data, "excellence_multiplier", 0.8),
            peer_normalization=_as_bool(data, "peer_normalization", True),
            type_weights=type_weights,
        )


@dataclass
class RankingConfig:
    """Batch ranking and display settings."""
    include_completed: bool = False
    default_level: str = "all"

    _LEVELS = ("all", "high", "medium", "low")

    @classmethod
    def from_dict(cls, data: dict) -> RankingConfig:
        level = str(data.get("default_level", "all")).lower()
        if level not in cls._LEVELS:
            raise ValueError(f"default_level must be one of {cls._LEVELS}, got {level!r}")
        return cls(
            include_completed=_as_bool(data, "include_completed", False),
            default_level=level,
        )


@dataclass
class AppConfig:
    """Top-level CanvasPal configuration."""
    weights: WeightConfig = field(default_factory=WeightConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> AppConfig:
        return cls(
            weights=WeightConfig.from_dict(data.get("weights") or {}),
            scoring=ScoringConfig.from_dict(data.get("scoring") or {}),
            ranking=RankingConfig.from_dict(data.get("ranking") or {}),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppConfig:
        """Load config from YAML file with env var expansion."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            raw = yaml.safe_load(f)
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        expanded = _expand_env_vars(raw)
        return cls.from_dict(expanded)

    @classmethod
    def default(cls) -> AppConfig:
        """Create config with all defaults."""
        return cls()


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from file or use defaults.

    Resolution order:
    1. Explicit path argument
    2. CANVASPAL_CONFIG environment variable
    3. ./canvaspal.yaml
    4. ~/.canvaspal/config.yaml
    5. Default values
    """
    if path:
        return AppConfig.from_yaml(path)

    env_path = os.environ.get("CANVASPAL_CONFIG")
    if env_path:
        return AppConfig.from_yaml(env_path)

    local_path = Path("canvaspal.yaml")
    if local_path.exists():
        return AppConfig.from_yaml(local_path)

    home_path = Path.home() / ".canvaspal" / "config.yaml"
    if home_path.exists():
        return AppConfig.from_yaml(home_path)

    return AppConfig.default()
