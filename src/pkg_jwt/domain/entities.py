from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .constants import HeaderParameter, RegisteredClaim
from .value_objects import normalize_audience


class _ClaimMapping(Mapping[str, Any]):
    """
    Read-only view over a decoded JSON object.

    The source mapping is deep-copied on construction, so later changes to
    the caller's dict never leak into a decoded token.
    """

    __slots__ = ("_claims",)

    def __init__(self, claims: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_claims", MappingProxyType(copy.deepcopy(dict(claims or {}))))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getitem__(self, key: str) -> Any:
        return self._claims[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._claims)

    def __len__(self) -> int:
        return len(self._claims)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._claims)!r})"

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(dict(self._claims))


class JWTHeader(_ClaimMapping):
    """
    JOSE header. `alg` is required by the validator; everything else is
    optional and extension parameters are kept as-is.
    """

    __slots__ = ()

    def _param(self, param: HeaderParameter) -> Any:
        return self._claims.get(param.value)

    @property
    def alg(self) -> Optional[str]:
        return self._param(HeaderParameter.ALGORITHM)

    @property
    def typ(self) -> Optional[str]:
        return self._param(HeaderParameter.TYPE)

    @property
    def cty(self) -> Optional[str]:
        return self._param(HeaderParameter.CONTENT_TYPE)

    @property
    def kid(self) -> Optional[str]:
        return self._param(HeaderParameter.KEY_ID)

    @property
    def x5u(self) -> Optional[str]:
        return self._param(HeaderParameter.X509_URL)

    @property
    def x5c(self) -> Optional[List[str]]:
        return self._param(HeaderParameter.X509_CHAIN)

    @property
    def x5t(self) -> Optional[str]:
        return self._param(HeaderParameter.X509_THUMBPRINT)

    @property
    def x5t_s256(self) -> Optional[str]:
        return self._param(HeaderParameter.X509_THUMBPRINT_S256)

    @property
    def crit(self) -> Optional[List[str]]:
        return self._param(HeaderParameter.CRITICAL)


class JWTPayload(_ClaimMapping):
    """
    Claims set. Registered claims get typed accessors, custom claims are
    reached with normal mapping access (`payload["role"]`).
    """

    __slots__ = ()

    def _claim(self, claim: RegisteredClaim) -> Any:
        return self._claims.get(claim.value)

    @property
    def iss(self) -> Optional[str]:
        return self._claim(RegisteredClaim.ISSUER)

    @property
    def sub(self) -> Optional[str]:
        return self._claim(RegisteredClaim.SUBJECT)

    @property
    def aud(self) -> str | List[str] | None:
        return self._claim(RegisteredClaim.AUDIENCE)

    @property
    def exp(self) -> Optional[int]:
        return self._claim(RegisteredClaim.EXPIRATION)

    @property
    def nbf(self) -> Optional[int]:
        return self._claim(RegisteredClaim.NOT_BEFORE)

    @property
    def iat(self) -> Optional[int]:
        return self._claim(RegisteredClaim.ISSUED_AT)

    @property
    def jti(self) -> Optional[str]:
        return self._claim(RegisteredClaim.JWT_ID)

    @property
    def audiences(self) -> Tuple[str, ...]:
        """`aud` as a tuple, whether the token carries a string or a list."""
        return normalize_audience(self.aud)


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """
    Header, payload and the untouched signature segment.

    `signature` is None for a two-segment (unsigned) token and the raw
    base64url text otherwise; it is never decoded. Plain mappings passed as
    header or payload are wrapped in their read-only claim types.
    """
    header: JWTHeader
    payload: JWTPayload
    signature: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.header, JWTHeader):
            object.__setattr__(self, "header", JWTHeader(self.header))
        if not isinstance(self.payload, JWTPayload):
            object.__setattr__(self, "payload", JWTPayload(self.payload))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": self.header.to_dict(),
            "payload": self.payload.to_dict(),
            "signature": self.signature,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Outcome of running the claim checks against a decoded token.

    `errors` keeps the order in which the checks ran. The time flags are
    reported separately so callers can tell "expired" apart from other
    failures.
    """
    errors: Tuple[str, ...] = ()
    is_expired: bool = False
    is_not_yet_valid: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "is_expired": self.is_expired,
            "is_not_yet_valid": self.is_not_yet_valid,
        }


@dataclass(frozen=True, slots=True)
class DecodeAndValidateResult(ValidationResult):
    """
    Validation result bundled with the token it was computed for.
    """
    jwt: DecodedToken = field(kw_only=True)

    # --- Read-only shortcuts ----------------------------------------------

    @property
    def header(self) -> JWTHeader:
        return self.jwt.header

    @property
    def payload(self) -> JWTPayload:
        return self.jwt.payload
