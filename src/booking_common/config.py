# ABOUTME: Loads wait thresholds and score weights from YAML or host settings.
# ABOUTME: Falls back to the built-in wait policy when a setting is missing or zero.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .errors import InvalidConfig
from .schemas import ScoreWeights, WaitConfig

DEFAULT_WAIT_DAYS = 9
DEFAULT_OVERDUE_MULTIPLIER = 3
DEFAULT_LATE_MULTIPLIER = 4

WAIT_KEYS = {"next_session_wait_days", "overdue_multiplier", "late_multiplier"}
WEIGHT_KEYS = {"recency", "slots", "activity", "completions"}


def default_wait_config() -> WaitConfig:
    return WaitConfig(
        base_wait_days=DEFAULT_WAIT_DAYS,
        overdue_multiplier=DEFAULT_OVERDUE_MULTIPLIER,
        late_multiplier=DEFAULT_LATE_MULTIPLIER,
    )


@dataclass(frozen=True)
class PriorityConfig:
    """Everything the engine reads from configuration."""

    weights: ScoreWeights = field(default_factory=ScoreWeights)
    wait: WaitConfig = field(default_factory=default_wait_config)


def _setting_number(settings: Mapping[str, Any], key: str, convert):
    """Read a numeric host setting that may arrive as a string; empty strings read as unset."""

    raw = settings.get(key)
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        try:
            return convert(raw)
        except ValueError as exc:
            raise InvalidConfig(f"Setting '{key}' must be numeric, got {settings.get(key)!r}.") from exc
    return raw


def wait_config_from_settings(settings: Mapping[str, Any]) -> WaitConfig:
    """
    Build a WaitConfig from a flat settings mapping.

    Values may be numbers or numeric strings. An unset, empty, or zero
    ``next_session_wait_days`` uses the default wait, the same way the booking
    site treats an empty admin setting.
    """

    unknown = set(settings) - WAIT_KEYS
    if unknown:
        raise InvalidConfig(f"Unknown wait settings: {', '.join(sorted(unknown))}.")

    wait_days = _setting_number(settings, "next_session_wait_days", int)
    overdue = _setting_number(settings, "overdue_multiplier", float)
    late = _setting_number(settings, "late_multiplier", float)
    return WaitConfig(
        base_wait_days=wait_days or DEFAULT_WAIT_DAYS,
        overdue_multiplier=DEFAULT_OVERDUE_MULTIPLIER if overdue is None else overdue,
        late_multiplier=DEFAULT_LATE_MULTIPLIER if late is None else late,
    )


def weights_from_settings(settings: Mapping[str, Any]) -> ScoreWeights:
    unknown = set(settings) - WEIGHT_KEYS
    if unknown:
        raise InvalidConfig(f"Unknown weight settings: {', '.join(sorted(unknown))}.")
    return ScoreWeights(**settings)


def parse_priority_config(cfg: Optional[Mapping[str, Any]]) -> PriorityConfig:
    """Validate an already-parsed config mapping."""

    cfg = cfg or {}
    if not isinstance(cfg, Mapping):
        raise InvalidConfig("Priority config must be a mapping at the top level.")

    unknown = set(cfg) - {"wait", "weights"}
    if unknown:
        raise InvalidConfig(f"Unknown config sections: {', '.join(sorted(unknown))}.")

    return PriorityConfig(
        weights=weights_from_settings(cfg.get("weights") or {}),
        wait=wait_config_from_settings(cfg.get("wait") or {}),
    )


def load_priority_config(config_path: Path) -> PriorityConfig:
    """Read a priority config YAML file."""

    with open(config_path) as f:
        cfg = yaml.safe_load(f)

    return parse_priority_config(cfg)
