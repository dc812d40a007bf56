from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import HTTPConnection

# Expose this so apps can plug it into dependencies if they want OpenAPI security
bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_COOKIE_NAME = "access_token"
BEARER_PREFIX = "Bearer "


def find_token(connection: HTTPConnection, cookie_name: str = DEFAULT_COOKIE_NAME) -> Optional[str]:
    """
    Look for a token in:

      1. Authorization: Bearer <token>
      2. Cookie: cookie_name

    Returns None when neither is present. Shared with the Strawberry
    integration, which has no HTTPBearer credentials to start from.
    """
    auth_header = connection.headers.get("Authorization")
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        token = auth_header.removeprefix(BEARER_PREFIX).strip()
        if token:
            return token

    cookie_token = connection.cookies.get(cookie_name)
    if cookie_token:
        return cookie_token

    return None


def extract_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
    cookie_name: str = DEFAULT_COOKIE_NAME,
) -> str:
    """
    Extract a token, preferring HTTPBearer credentials, then the raw
    Authorization header, then the cookie.

    Raises HTTPException(401) if no token is found.
    """
    if credentials is not None:
        token = (credentials.credentials or "").strip()
        if token:
            return token

    token = find_token(request, cookie_name)
    if token:
        return token

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
