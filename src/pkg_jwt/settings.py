from __future__ import annotations

import os
from typing import Mapping, Optional

from .domain.constants import DEFAULT_CLOCK_SKEW
from .domain.value_objects import ValidationOptions


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> ValidationOptions:
    """
    Build ValidationOptions from environment variables:

      JWT_VALIDATE_EXP       bool, default true
      JWT_VALIDATE_NBF       bool, default true
      JWT_CLOCK_SKEW         int seconds, default 30
      JWT_EXPECTED_ISSUER    optional
      JWT_EXPECTED_AUDIENCE  optional, comma separated
    """
    env = os.environ if environ is None else environ

    def _bool(key: str, default: bool = True) -> bool:
        raw = env.get(key)
        if raw is None or not raw.strip():
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _int(key: str, default: int) -> int:
        raw = env.get(key)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise RuntimeError(f"Invalid integer for {key}: {raw!r}") from exc

    def _split_csv(key: str) -> list[str]:
        raw = env.get(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    return ValidationOptions(
        validate_exp=_bool("JWT_VALIDATE_EXP", True),
        validate_nbf=_bool("JWT_VALIDATE_NBF", True),
        clock_skew=_int("JWT_CLOCK_SKEW", DEFAULT_CLOCK_SKEW),
        expected_issuer=(env.get("JWT_EXPECTED_ISSUER") or "").strip() or None,
        expected_audience=_split_csv("JWT_EXPECTED_AUDIENCE"),
    )
