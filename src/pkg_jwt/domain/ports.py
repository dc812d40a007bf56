from __future__ import annotations

from typing import Protocol, Mapping, Any


class SegmentDecoder(Protocol):
    """
    Port for turning one base64url token segment into raw bytes.

    Implementations live in the adapters layer (e.g. the table-driven codec).
    """

    def decode(self, segment: str) -> bytes:
        """
        Raises:
          - Base64DecodeError
        """
        ...


class ClaimParser(Protocol):
    """
    Port for parsing decoded segment bytes into a claims mapping.
    """

    def parse(self, raw: bytes, segment: str) -> Mapping[str, Any]:
        """
        `segment` names the part being parsed ("header" / "payload") and is
        only used in error messages.

        Raises:
          - ClaimParseError
        """
        ...


class Clock(Protocol):
    """Source of the current time in whole seconds since the epoch."""

    def now(self) -> int:
        ...
