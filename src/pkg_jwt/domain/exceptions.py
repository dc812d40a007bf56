class JWTDecodeError(ValueError):
    """Raised when a token cannot be decoded into header and payload."""
    pass


class MalformedTokenError(JWTDecodeError):
    """Raised when the input is not a 2- or 3-segment token string."""
    pass


class Base64DecodeError(JWTDecodeError):
    """Raised when a segment is not valid base64url text."""
    pass


class ClaimParseError(JWTDecodeError):
    """Raised when a decoded segment is not a JSON object."""
    pass
