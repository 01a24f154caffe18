"""
Runtime configuration for the cross-checker.

Defaults reproduce the tuned grading heuristics.  Deployments may override
them through environment variables (optionally from a ``.env`` file loaded by
the entry point).  The validator never reads the environment itself: callers
build a ValidatorConfig and hand it in.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

ENV_PREFIX = "CROSSCHECK_"

DEFAULT_COMMON_FULL_SCORES: tuple[float, ...] = (100, 150, 120, 90, 80)

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class ValidatorConfig(BaseModel):
    """Thresholds and defaults used by CrossModelValidator."""

    model_config = ConfigDict(frozen=True)

    # Max |a - b| for two numeric scores to still count as agreeing
    number_tolerance: float = Field(default=1.0, ge=0)
    # Similarity strictly above this counts as the same text
    similarity_threshold: float = Field(default=0.8, ge=0, le=1)
    # Full scores seen on real papers; used to break fullScore ties
    common_full_scores: tuple[float, ...] = Field(
        default=DEFAULT_COMMON_FULL_SCORES, min_length=1
    )
    primary_provider: str = "doubao"
    secondary_provider: str = "aliyun"
    log_level: str = "INFO"


def load_config(environ: Mapping[str, str] | None = None) -> ValidatorConfig:
    """Build a ValidatorConfig from ``CROSSCHECK_*`` environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Raises:
        ConfigurationError: if any variable is malformed or out of range.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}

    for name in ("number_tolerance", "similarity_threshold"):
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None:
            overrides[name] = _parse_float(name, raw)

    raw_scores = env.get(ENV_PREFIX + "COMMON_FULL_SCORES")
    if raw_scores is not None:
        overrides["common_full_scores"] = tuple(
            _parse_float("common_full_scores", part)
            for part in raw_scores.split(",")
            if part.strip()
        )

    for name in ("primary_provider", "secondary_provider"):
        raw = env.get(ENV_PREFIX + name.upper())
        if raw:
            overrides[name] = raw.strip()

    raw_level = env.get(ENV_PREFIX + "LOG_LEVEL")
    if raw_level:
        level = raw_level.strip().upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level '{raw_level}'. Expected one of: "
                f"{', '.join(sorted(_LOG_LEVELS))}.",
                details={"log_level": raw_level},
            )
        overrides["log_level"] = level

    try:
        return ValidatorConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid cross-check configuration: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def configure_logging(config: ValidatorConfig) -> None:
    """Apply the configured level to the root logger (entry points only)."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name.upper()} must be a number, got '{raw}'",
            details={"name": name, "value": raw},
        ) from e
