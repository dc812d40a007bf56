from enum import Enum


DEFAULT_CLOCK_SKEW = 30  # seconds


class RegisteredClaim(Enum):
    ISSUER = "iss"
    SUBJECT = "sub"
    AUDIENCE = "aud"
    EXPIRATION = "exp"
    NOT_BEFORE = "nbf"
    ISSUED_AT = "iat"
    JWT_ID = "jti"


class HeaderParameter(Enum):
    ALGORITHM = "alg"
    TYPE = "typ"
    CONTENT_TYPE = "cty"
    KEY_ID = "kid"
    X509_URL = "x5u"
    X509_CHAIN = "x5c"
    X509_THUMBPRINT = "x5t"
    X509_THUMBPRINT_S256 = "x5t#S256"
    CRITICAL = "crit"


# Validation messages are part of the public contract: callers match on them.
MISSING_ALGORITHM = "JWT header must contain an algorithm (alg)"
TOKEN_EXPIRED = "JWT has expired"
TOKEN_NOT_YET_VALID = "JWT is not yet valid (before nbf time)"
