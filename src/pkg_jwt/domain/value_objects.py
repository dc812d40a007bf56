# src/pkg_jwt/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from .constants import DEFAULT_CLOCK_SKEW


def normalize_audience(values: Any) -> Tuple[str, ...]:
    """
    Normalize an audience value into a tuple.

    - None / empty list -> ()
    - a plain string    -> single-element tuple
    - list / tuple / set / frozenset -> tuple, order preserved
    - anything else (a number from a sloppy issuer) -> single-element tuple

    An absent `aud` claim and an empty list are treated as the same thing.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,) if values else ()
    if isinstance(values, (list, tuple, set, frozenset)):
        return tuple(values)
    return (values,)


@dataclass(frozen=True, slots=True)
class ValidationOptions:
    """
    Declarative description of which claim checks to run.

    - validate_exp / validate_nbf: toggle the time-based checks
    - clock_skew:        tolerance in seconds applied to both time checks
    - expected_issuer:   exact (case-sensitive) match against `iss`
    - expected_audience: one or more acceptable `aud` values (any match wins)
    - current_time:      override for "now" in seconds since the epoch

    `expected_audience` accepts a string or any iterable of strings and is
    stored as a tuple.
    """

    validate_exp: bool = True
    validate_nbf: bool = True
    clock_skew: int = DEFAULT_CLOCK_SKEW
    expected_issuer: Optional[str] = None
    expected_audience: Tuple[str, ...] = ()
    current_time: Optional[int] = None

    def __init__(
            self,
            *,
            validate_exp: bool = True,
            validate_nbf: bool = True,
            clock_skew: int = DEFAULT_CLOCK_SKEW,
            expected_issuer: str | None = None,
            expected_audience: str | Iterable[str] | None = None,
            current_time: int | None = None,
    ) -> None:
        object.__setattr__(self, "validate_exp", validate_exp)
        object.__setattr__(self, "validate_nbf", validate_nbf)
        object.__setattr__(self, "clock_skew", clock_skew)
        object.__setattr__(self, "expected_issuer", expected_issuer)
        object.__setattr__(self, "expected_audience", normalize_audience(expected_audience))
        object.__setattr__(self, "current_time", current_time)
