from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Type

from graphql import GraphQLError
from starlette.requests import Request
from strawberry.permission import BasePermission
from strawberry.types import Info

from ..common.decoder_factory import JWTDecoder, create_jwt_decoder
from ..fastapi.security import DEFAULT_COOKIE_NAME, find_token
from ...domain.constants import TOKEN_EXPIRED
from ...domain.entities import DecodeAndValidateResult
from ...domain.exceptions import JWTDecodeError
from ...domain.value_objects import ValidationOptions


# --------------------------------------------------------------------- #
# Context type used by Strawberry
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryClaimsContext:
    """
    Default context type for Strawberry GraphQL.

    `token` is the decoded and validated token, or None for anonymous
    requests. Extend it in your app if you need more fields.
    """
    request: Optional[Request] = None
    token: Optional[DecodeAndValidateResult] = None
    extra: Any = None  # host app can put UoW, services, etc. here if desired


# --------------------------------------------------------------------- #
# Main integration: StrawberryClaims
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryClaims:
    """
    Strawberry GraphQL integration for pkg_jwt.

    Responsibilities:
      - provide a `context_getter` for Strawberry's GraphQLRouter
      - provide permission classes you can attach to fields/mutations

    Token extraction:
      - checks Authorization: Bearer <token>
      - falls back to `cookie_name` (default: "access_token")
    """

    decoder: JWTDecoder
    options: ValidationOptions = field(default_factory=ValidationOptions)
    cookie_name: str = DEFAULT_COOKIE_NAME

    # ----------------------------------------------------------------- #
    # Context getter
    # ----------------------------------------------------------------- #

    def _inspect(self, token: str) -> DecodeAndValidateResult:
        """Decode + validate, raising GraphQLError on any failure."""
        try:
            result = self.decoder.decode_and_validate(token, self.options)
        except JWTDecodeError as exc:
            raise GraphQLError(str(exc)) from exc

        if not result.is_valid:
            if result.errors == (TOKEN_EXPIRED,):
                raise GraphQLError("Token expired")
            raise GraphQLError("; ".join(result.errors))
        return result

    def make_context_getter(
        self,
        *,
        optional: bool = True,
        extra_factory: Optional[Callable[[Request, Optional[DecodeAndValidateResult]], Any]] = None,
    ):
        """
        Build an async function compatible with:

            strawberry.fastapi.GraphQLRouter(context_getter=...)

        Args:
            optional:
                - True:   missing/invalid tokens become `token=None` in context
                - False:  they become GraphQL errors
            extra_factory:
                - Optional callable: (request, token | None) -> Any
                - Whatever it returns will be stored on context.extra
        """

        def _anonymous(request: Request) -> StrawberryClaimsContext:
            extra = extra_factory(request, None) if extra_factory else None
            return StrawberryClaimsContext(request=request, token=None, extra=extra)

        async def _context_getter(request: Request) -> StrawberryClaimsContext:
            raw = find_token(request, self.cookie_name)

            if not raw:
                if optional:
                    return _anonymous(request)
                raise GraphQLError("Not authenticated")

            try:
                token = self._inspect(raw)
            except GraphQLError:
                if optional:
                    return _anonymous(request)
                raise

            extra = extra_factory(request, token) if extra_factory else None
            return StrawberryClaimsContext(request=request, token=token, extra=extra)

        return _context_getter

    # ----------------------------------------------------------------- #
    # Permission helpers
    # ----------------------------------------------------------------- #

    def require_valid_token(self) -> Type[BasePermission]:
        """
        Permission: the request carried a valid token (context.token is set).
        """

        class _RequireValidToken(BasePermission):
            message = "Authentication required"

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryClaimsContext = info.context
                return ctx.token is not None

        return _RequireValidToken

    def require_claims(self, **expected: Any) -> Type[BasePermission]:
        """
        Permission: every given payload claim must equal the value.

        Example:

            RequireAdmin = strawberry_claims.require_claims(role="admin")

            @strawberry.field(permission_classes=[RequireAdmin])
            def secret_stuff(self, info: Info) -> str:
                ...
        """
        wanted = dict(expected)

        class _RequireClaims(BasePermission):
            message = "Forbidden"

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryClaimsContext = info.context
                if ctx.token is None:
                    self.message = "Authentication required"
                    return False

                for name, value in wanted.items():
                    actual = ctx.token.payload.get(name)
                    if actual != value:
                        self.message = f"Claim {name!r} mismatch. Expected: {value}, Got: {actual}"
                        return False
                return True

        return _RequireClaims


# --------------------------------------------------------------------- #
# High-level helper
# --------------------------------------------------------------------- #

def create_strawberry_claims(
    *,
    options: ValidationOptions | None = None,
    cookie_name: str = DEFAULT_COOKIE_NAME,
    decoder: JWTDecoder | None = None,
) -> StrawberryClaims:
    """
    Convenience helper:

        strawberry_claims = create_strawberry_claims(
            options=ValidationOptions(expected_audience="articles-api"),
        )
    """
    return StrawberryClaims(
        decoder=decoder or create_jwt_decoder(),
        options=options or ValidationOptions(),
        cookie_name=cookie_name,
    )
