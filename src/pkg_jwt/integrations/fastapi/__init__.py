from __future__ import annotations

from .deps import FastAPIClaims
from .security import bearer_scheme, extract_token_from_request, find_token
from ..common.decoder_factory import JWTDecoder, create_jwt_decoder
from ...domain.value_objects import ValidationOptions


def create_fastapi_claims(
    *,
    options: ValidationOptions | None = None,
    cookie_name: str = "access_token",
    decoder: JWTDecoder | None = None,
) -> FastAPIClaims:
    """
    High-level helper for FastAPI apps:

    - Creates a JWTDecoder (unless one is passed in)
    - Wraps it in FastAPIClaims, exposing dependencies like:

        fastapi_claims.get_claims
        fastapi_claims.get_optional_claims
        fastapi_claims.require_claims(...)
        fastapi_claims.require_any_audience(...)
    """
    return FastAPIClaims(
        decoder=decoder or create_jwt_decoder(),
        options=options or ValidationOptions(),
        cookie_name=cookie_name,
    )


__all__ = [
    "FastAPIClaims",
    "bearer_scheme",
    "extract_token_from_request",
    "find_token",
    "create_fastapi_claims",
]
