from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping

from ...adapters.clock import SystemClock
from ...domain.constants import (
    MISSING_ALGORITHM,
    TOKEN_EXPIRED,
    TOKEN_NOT_YET_VALID,
    RegisteredClaim,
)
from ...domain.entities import DecodedToken, ValidationResult
from ...domain.ports import Clock
from ...domain.value_objects import ValidationOptions, normalize_audience

logger = logging.getLogger(__name__)


def numeric_date(claims: Mapping[str, Any], claim: RegisteredClaim) -> int | float | None:
    """
    Return a NumericDate claim, or None when it is not a number.

    Callers check presence first; a present but non-numeric value (string,
    null, bool, or a non-finite float) is reported as None so the check
    fails closed.
    """
    value = claims.get(claim.value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _join(values: Any) -> str:
    return ", ".join(str(v) for v in values)


@dataclass(frozen=True, slots=True)
class ValidateTokenUseCase:
    """
    Application use case: run every claim check against a decoded token.

    Checks never short-circuit and never raise; each failing check
    contributes one message, in this order:

      1. header `alg` present
      2. expiration (`exp` + clock skew)
      3. not-before (`nbf` - clock skew)
      4. issuer (exact match)
      5. audience (any overlap)
    """

    clock: Clock = field(default_factory=SystemClock)

    def execute(
            self,
            token: DecodedToken,
            options: ValidationOptions | None = None,
    ) -> ValidationResult:
        options = options or ValidationOptions()
        now = options.current_time if options.current_time is not None else self.clock.now()
        skew = options.clock_skew

        header = token.header
        payload = token.payload
        errors: List[str] = []

        # ---- Header -------------------------------------------------------
        if not header.alg:
            errors.append(MISSING_ALGORITHM)

        # ---- Expiration ---------------------------------------------------
        is_expired = False
        if options.validate_exp and RegisteredClaim.EXPIRATION.value in payload:
            exp = numeric_date(payload, RegisteredClaim.EXPIRATION)
            is_expired = exp is None or now > exp + skew
            if is_expired:
                errors.append(TOKEN_EXPIRED)

        # ---- Not before ---------------------------------------------------
        is_not_yet_valid = False
        if options.validate_nbf and RegisteredClaim.NOT_BEFORE.value in payload:
            nbf = numeric_date(payload, RegisteredClaim.NOT_BEFORE)
            is_not_yet_valid = nbf is None or now < nbf - skew
            if is_not_yet_valid:
                errors.append(TOKEN_NOT_YET_VALID)

        # ---- Issuer -------------------------------------------------------
        if options.expected_issuer and payload.iss != options.expected_issuer:
            errors.append(
                f"JWT issuer mismatch. Expected: {options.expected_issuer}, Got: {payload.iss}"
            )

        # ---- Audience -----------------------------------------------------
        if options.expected_audience:
            expected = options.expected_audience
            actual = normalize_audience(payload.aud)
            if not any(aud in actual for aud in expected):
                errors.append(
                    f"JWT audience mismatch. Expected one of: {_join(expected)}, "
                    f"Got: {_join(actual)}"
                )

        if errors:
            logger.debug("JWT validation failed: %s", "; ".join(errors))

        return ValidationResult(
            errors=tuple(errors),
            is_expired=is_expired,
            is_not_yet_valid=is_not_yet_valid,
        )
