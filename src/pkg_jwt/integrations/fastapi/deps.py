from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials

from .security import DEFAULT_COOKIE_NAME, bearer_scheme, extract_token_from_request
from ..common.decoder_factory import JWTDecoder
from ...domain.constants import TOKEN_EXPIRED
from ...domain.entities import DecodeAndValidateResult
from ...domain.exceptions import JWTDecodeError
from ...domain.value_objects import ValidationOptions

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


@dataclass(slots=True)
class FastAPIClaims:
    """
    FastAPI integration for pkg_jwt.

    Meant for services that sit behind something that already verified the
    token signature (API gateway, service mesh) and only need the claims,
    checked for expiry / issuer / audience. Dependencies hand the route a
    `DecodeAndValidateResult`.
    """

    decoder: JWTDecoder
    options: ValidationOptions = field(default_factory=ValidationOptions)
    cookie_name: str = DEFAULT_COOKIE_NAME

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    def inspect(self, token: str) -> DecodeAndValidateResult:
        """
        Decode + validate, translating failures into HTTPException(401).
        """
        try:
            result = self.decoder.decode_and_validate(token, self.options)
        except JWTDecodeError as exc:
            raise _unauthorized(str(exc)) from exc

        if not result.is_valid:
            logger.debug("Rejecting token: %s", result.errors)
            if result.errors == (TOKEN_EXPIRED,):
                raise _unauthorized("Token expired")
            raise _unauthorized("; ".join(result.errors))

        return result

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_claims(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> DecodeAndValidateResult:
        """Dependency: require a decodable, valid token."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        return self.inspect(token)

    async def get_optional_claims(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> DecodeAndValidateResult | None:
        """Dependency: valid token if there is one, otherwise None."""
        try:
            token = extract_token_from_request(request, credentials, self.cookie_name)
            return self.inspect(token)
        except HTTPException:
            # no token, or a bad one -> anonymous
            return None

    # ------------------------------------------------------------------ #
    # Claim dependency factories
    # ------------------------------------------------------------------ #

    def require_claims(self, **expected: Any) -> Callable:
        """
        Dependency factory: every given payload claim must equal the value.

            @app.get("/admin")
            async def admin(token=Depends(claims.require_claims(role="admin"))):
                ...
        """

        async def dependency(
                token: DecodeAndValidateResult = Depends(self.get_claims),
        ) -> DecodeAndValidateResult:
            for name, value in expected.items():
                actual = token.payload.get(name)
                if actual != value:
                    raise HTTPException(
                        status_code=status.HTTP_403_FORBIDDEN,
                        detail=f"Claim {name!r} mismatch. Expected: {value}, Got: {actual}",
                    )
            return token

        return dependency

    def require_any_audience(self, *audiences: str) -> Callable:
        """
        Dependency factory: the token audience must include any of the given
        values, on top of whatever `options.expected_audience` enforces.
        """

        async def dependency(
                token: DecodeAndValidateResult = Depends(self.get_claims),
        ) -> DecodeAndValidateResult:
            actual = token.payload.audiences
            if not any(aud in actual for aud in audiences):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Missing at least one required audience from: {list(audiences)}",
                )
            return token

        return dependency


"""

from pkg_jwt.integrations.fastapi import create_fastapi_claims
from pkg_jwt import options_from_env

fastapi_claims = create_fastapi_claims(options=options_from_env())

get_claims = fastapi_claims.get_claims
get_optional_claims = fastapi_claims.get_optional_claims
require_claims = fastapi_claims.require_claims
require_any_audience = fastapi_claims.require_any_audience


"""
