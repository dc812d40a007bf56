"""
pkg_jwt

Decode and sanity-check JSON Web Tokens without verifying their signature.
Signature checks belong to whoever issued or relays the token; this package
only extracts claims and runs time / issuer / audience checks locally.
"""

__version__ = "0.1.0"

from .domain.constants import DEFAULT_CLOCK_SKEW, HeaderParameter, RegisteredClaim
from .domain.entities import (
    DecodeAndValidateResult,
    DecodedToken,
    JWTHeader,
    JWTPayload,
    ValidationResult,
)
from .domain.exceptions import (
    JWTDecodeError,
    MalformedTokenError,
    Base64DecodeError,
    ClaimParseError,
)
from .domain.value_objects import ValidationOptions
from .domain.ports import SegmentDecoder, ClaimParser, Clock

from .application.use_cases.decode import DecodeTokenUseCase, split_token
from .application.use_cases.validate import ValidateTokenUseCase

from .adapters.base64url import Base64UrlCodec
from .adapters.json_claims import JsonClaimParser
from .adapters.clock import SystemClock, FixedClock

from .integrations.common.decoder_factory import JWTDecoder, create_jwt_decoder
from .settings import options_from_env

# Shared default instance: stateless, safe to use from any thread.
default_decoder = create_jwt_decoder()

jwt_decode = default_decoder.decode
jwt_validate = default_decoder.validate
jwt_decode_and_validate = default_decoder.decode_and_validate
jwt_get_payload = default_decoder.get_payload
jwt_get_header = default_decoder.get_header
jwt_is_expired = default_decoder.is_expired
jwt_get_time_until_expiration = default_decoder.get_time_until_expiration

__all__ = [
    "__version__",
    # domain core
    "DEFAULT_CLOCK_SKEW",
    "HeaderParameter",
    "RegisteredClaim",
    "DecodedToken",
    "JWTHeader",
    "JWTPayload",
    "ValidationResult",
    "DecodeAndValidateResult",
    "ValidationOptions",
    "SegmentDecoder",
    "ClaimParser",
    "Clock",
    # exceptions
    "JWTDecodeError",
    "MalformedTokenError",
    "Base64DecodeError",
    "ClaimParseError",
    # use cases
    "DecodeTokenUseCase",
    "ValidateTokenUseCase",
    "split_token",
    # adapters
    "Base64UrlCodec",
    "JsonClaimParser",
    "SystemClock",
    "FixedClock",
    # facade + config
    "JWTDecoder",
    "create_jwt_decoder",
    "default_decoder",
    "options_from_env",
    # convenience functions
    "jwt_decode",
    "jwt_validate",
    "jwt_decode_and_validate",
    "jwt_get_payload",
    "jwt_get_header",
    "jwt_is_expired",
    "jwt_get_time_until_expiration",
]
