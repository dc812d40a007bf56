from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...adapters.base64url import Base64UrlCodec
from ...adapters.clock import SystemClock
from ...adapters.json_claims import JsonClaimParser
from ...application.use_cases.decode import DecodeTokenUseCase
from ...application.use_cases.validate import ValidateTokenUseCase, numeric_date
from ...domain.constants import DEFAULT_CLOCK_SKEW, RegisteredClaim
from ...domain.entities import (
    DecodeAndValidateResult,
    DecodedToken,
    JWTHeader,
    JWTPayload,
    ValidationResult,
)
from ...domain.exceptions import JWTDecodeError
from ...domain.ports import ClaimParser, Clock, SegmentDecoder
from ...domain.value_objects import ValidationOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JWTDecoder:
    """
    Framework-agnostic facade over the decode and validate use cases.

    Integrations (CLI, FastAPI, Strawberry) and the module-level
    `jwt_*` helpers are thin wrappers around one instance of this class.
    Holds no mutable state, so one instance can be shared freely.
    """

    decode_use_case: DecodeTokenUseCase
    validate_use_case: ValidateTokenUseCase
    clock: Clock

    # --- Core operations --------------------------------------------------

    def decode(self, token: str) -> DecodedToken:
        """Token -> DecodedToken (or raise JWTDecodeError)."""
        return self.decode_use_case.execute(token)

    def validate(
            self,
            token: DecodedToken,
            options: ValidationOptions | None = None,
    ) -> ValidationResult:
        """Run the claim checks; never raises."""
        return self.validate_use_case.execute(token, options)

    def decode_and_validate(
            self,
            token: str,
            options: ValidationOptions | None = None,
    ) -> DecodeAndValidateResult:
        """
        Decode, then validate. Decode errors propagate; there is no partial
        result for a token that cannot be decoded.
        """
        decoded = self.decode(token)
        result = self.validate(decoded, options)
        return DecodeAndValidateResult(
            errors=result.errors,
            is_expired=result.is_expired,
            is_not_yet_valid=result.is_not_yet_valid,
            jwt=decoded,
        )

    # --- Projections ------------------------------------------------------

    def get_header(self, token: str) -> JWTHeader:
        return self.decode(token).header

    def get_payload(self, token: str) -> JWTPayload:
        return self.decode(token).payload

    # --- Fail-safe queries ------------------------------------------------

    def is_expired(self, token: str, clock_skew: int = DEFAULT_CLOCK_SKEW) -> bool:
        """
        True if `exp` is in the past (beyond `clock_skew`).

        A token without `exp` never expires. A token that cannot be decoded
        is reported as expired.
        """
        try:
            payload = self.get_payload(token)
        except JWTDecodeError as exc:
            logger.debug("Treating undecodable token as expired: %s", exc)
            return True

        if RegisteredClaim.EXPIRATION.value not in payload:
            return False

        exp = numeric_date(payload, RegisteredClaim.EXPIRATION)
        if exp is None:
            return True
        return self.clock.now() > exp + clock_skew

    def get_time_until_expiration(self, token: str) -> Optional[int]:
        """
        Seconds left until `exp`, never negative.

        Returns None when the token has no `exp` claim, and 0 when the token
        cannot be decoded or its `exp` is not a number.
        """
        try:
            payload = self.get_payload(token)
        except JWTDecodeError as exc:
            logger.debug("Treating undecodable token as expired: %s", exc)
            return 0

        if RegisteredClaim.EXPIRATION.value not in payload:
            return None

        exp = numeric_date(payload, RegisteredClaim.EXPIRATION)
        if exp is None:
            return 0
        return max(int(exp - self.clock.now()), 0)


def create_jwt_decoder(
        *,
        clock: Clock | None = None,
        segment_decoder: SegmentDecoder | None = None,
        claim_parser: ClaimParser | None = None,
) -> JWTDecoder:
    """
    High-level factory: wire the default adapters into a JWTDecoder.

    Every collaborator can be swapped, e.g. a FixedClock in tests:

        decoder = create_jwt_decoder(clock=FixedClock(1_700_000_000))
    """
    clock = clock or SystemClock()

    decode_uc = DecodeTokenUseCase(
        segment_decoder=segment_decoder or Base64UrlCodec(),
        claim_parser=claim_parser or JsonClaimParser(),
    )
    validate_uc = ValidateTokenUseCase(clock=clock)

    return JWTDecoder(
        decode_use_case=decode_uc,
        validate_use_case=validate_uc,
        clock=clock,
    )
