import asyncio

import pytest
import strawberry
from graphql import GraphQLError
from starlette.requests import Request
from strawberry.types import Info

from pkg_jwt import FixedClock, ValidationOptions, create_jwt_decoder
from pkg_jwt.integrations.strawberry import StrawberryClaimsContext, create_strawberry_claims

from jwt_fixtures import NOW, sign

claims = create_strawberry_claims(
    options=ValidationOptions(expected_audience="graph"),
    decoder=create_jwt_decoder(clock=FixedClock(NOW)),
)

RequireValidToken = claims.require_valid_token()
RequireAdmin = claims.require_claims(role="admin")


@strawberry.type
class Query:
    @strawberry.field
    def public(self) -> str:
        return "hello"

    @strawberry.field(permission_classes=[RequireValidToken])
    def subject(self, info: Info) -> str:
        return info.context.token.payload.sub

    @strawberry.field(permission_classes=[RequireAdmin])
    def secret(self) -> str:
        return "42"


schema = strawberry.Schema(query=Query)


def _request(headers: dict[str, str] | None = None) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "POST", "path": "/graphql", "headers": raw, "query_string": b""})


def _context(token: str | None = None, **kwargs) -> StrawberryClaimsContext:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    getter = claims.make_context_getter(**kwargs)
    return asyncio.run(getter(_request(headers)))


# --- context getter ---

def test_context_with_valid_token():
    ctx = _context(sign({"sub": "user-1", "aud": "graph"}))

    assert ctx.token is not None
    assert ctx.token.payload.sub == "user-1"
    assert ctx.request is not None


def test_context_reads_cookie():
    token = sign({"sub": "cookie-user", "aud": "graph"})
    getter = claims.make_context_getter()

    ctx = asyncio.run(getter(_request({"Cookie": f"access_token={token}"})))

    assert ctx.token.payload.sub == "cookie-user"


def test_optional_context_is_anonymous_for_missing_or_bad_tokens():
    assert _context().token is None
    assert _context("not.a.jwt").token is None
    assert _context(sign({"sub": "s", "aud": "other"})).token is None


def test_required_context_raises():
    with pytest.raises(GraphQLError, match="Not authenticated"):
        _context(optional=False)

    with pytest.raises(GraphQLError, match="Failed to decode JWT"):
        _context("not.a.jwt", optional=False)

    with pytest.raises(GraphQLError, match="Token expired"):
        _context(sign({"aud": "graph", "exp": NOW - 3600}), optional=False)


def test_extra_factory():
    seen = []

    def extra_factory(request, token):
        seen.append(token)
        return {"services": "here"}

    ctx = _context(sign({"sub": "s", "aud": "graph"}), extra_factory=extra_factory)

    assert ctx.extra == {"services": "here"}
    assert seen[0] is ctx.token


# --- permissions ---

def test_public_field_needs_no_token():
    result = schema.execute_sync("{ public }", context_value=StrawberryClaimsContext())
    assert result.errors is None
    assert result.data == {"public": "hello"}


def test_require_valid_token():
    anonymous = schema.execute_sync("{ subject }", context_value=StrawberryClaimsContext())
    assert anonymous.errors[0].message == "Authentication required"

    ctx = _context(sign({"sub": "user-1", "aud": "graph"}))
    result = schema.execute_sync("{ subject }", context_value=ctx)
    assert result.errors is None
    assert result.data == {"subject": "user-1"}


def test_require_claims():
    admin = _context(sign({"sub": "s", "aud": "graph", "role": "admin"}))
    result = schema.execute_sync("{ secret }", context_value=admin)
    assert result.errors is None
    assert result.data == {"secret": "42"}

    user = _context(sign({"sub": "s", "aud": "graph", "role": "user"}))
    result = schema.execute_sync("{ secret }", context_value=user)
    assert result.errors[0].message == "Claim 'role' mismatch. Expected: admin, Got: user"

    result = schema.execute_sync("{ secret }", context_value=StrawberryClaimsContext())
    assert result.errors[0].message == "Authentication required"
