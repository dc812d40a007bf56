from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List

from ...adapters.base64url import Base64UrlCodec
from ...adapters.json_claims import JsonClaimParser
from ...domain.entities import DecodedToken, JWTHeader, JWTPayload
from ...domain.exceptions import Base64DecodeError, ClaimParseError, MalformedTokenError
from ...domain.ports import ClaimParser, SegmentDecoder

logger = logging.getLogger(__name__)

NON_EMPTY_STRING_REQUIRED = "JWT token must be a non-empty string"
WRONG_SEGMENT_COUNT = "JWT token must have 2 or 3 parts separated by dots"


def split_token(token: Any) -> List[str]:
    """
    Split a compact token into its segments.

    Two segments = header.payload (unsigned), three = header.payload.signature.

    Raises:
        MalformedTokenError
    """
    if not isinstance(token, str) or not token:
        raise MalformedTokenError(NON_EMPTY_STRING_REQUIRED)

    parts = token.split(".")
    if len(parts) not in (2, 3):
        raise MalformedTokenError(WRONG_SEGMENT_COUNT)
    return parts


@dataclass(frozen=True, slots=True)
class DecodeTokenUseCase:
    """
    Application use case:
    - split the token
    - base64url-decode header and payload through the SegmentDecoder port
    - parse both through the ClaimParser port

    The signature segment is carried over verbatim and never inspected.
    """

    segment_decoder: SegmentDecoder = field(default_factory=Base64UrlCodec)
    claim_parser: ClaimParser = field(default_factory=JsonClaimParser)

    def execute(self, token: str) -> DecodedToken:
        """
        Decode a token without verifying its signature.

        Raises:
            MalformedTokenError
            Base64DecodeError
            ClaimParseError
        """
        parts = split_token(token)

        try:
            # both segments are decoded before either is parsed
            raw_header = self.segment_decoder.decode(parts[0])
            raw_payload = self.segment_decoder.decode(parts[1])

            header = self.claim_parser.parse(raw_header, "header")
            payload = self.claim_parser.parse(raw_payload, "payload")
        except (Base64DecodeError, ClaimParseError) as exc:
            logger.debug("JWT decoding failed: %s", exc)
            raise type(exc)(f"Failed to decode JWT: {exc}") from exc

        return DecodedToken(
            header=JWTHeader(header),
            payload=JWTPayload(payload),
            signature=parts[2] if len(parts) == 3 else None,
        )
