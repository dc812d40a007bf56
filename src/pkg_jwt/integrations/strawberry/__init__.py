from .auth import (
    StrawberryClaims,
    StrawberryClaimsContext,
    create_strawberry_claims,
)

__all__ = [
    "StrawberryClaims",
    "StrawberryClaimsContext",
    "create_strawberry_claims",
]
