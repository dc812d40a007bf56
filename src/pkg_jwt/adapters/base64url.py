from __future__ import annotations

from ..domain.exceptions import Base64DecodeError
from ..domain.ports import SegmentDecoder

_STANDARD_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_URLSAFE_ALPHABET = _STANDARD_ALPHABET[:-2] + "-_"

_DECODE_TABLE = {ch: idx for idx, ch in enumerate(_STANDARD_ALPHABET)}
_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")

INVALID_ENCODING = "Invalid base64url encoding"


class Base64UrlCodec(SegmentDecoder):
    """
    Table-driven base64url codec.

    Does not go through the `base64` module, so the accepted input is
    exactly what is described here and nothing platform-specific:

    - `-` / `_` are read as `+` / `/`
    - missing padding is restored from the length (len % 4 == 1 is invalid)
    - `=` is only accepted as trailing padding of the last quantum
    - any other character outside the alphabet is rejected
    """

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def decode(self, segment: str) -> bytes:
        """
        Decode one base64url segment into bytes.

        Raises:
            Base64DecodeError
        """
        if not isinstance(segment, str):
            raise Base64DecodeError(INVALID_ENCODING)

        text = segment.translate(_URLSAFE_TO_STANDARD)

        remainder = len(text) % 4
        if remainder == 1:
            raise Base64DecodeError(INVALID_ENCODING)
        if remainder:
            text += "=" * (4 - remainder)

        out = bytearray()
        last_start = len(text) - 4
        for start in range(0, len(text), 4):
            out.extend(self._decode_quantum(text[start:start + 4], is_last=start == last_start))
        return bytes(out)

    # ------------------------------------------------------------------ #
    # Encoding (tooling / tests)
    # ------------------------------------------------------------------ #

    def encode(self, data: bytes | str) -> str:
        """Encode bytes (or UTF-8 text) as unpadded base64url."""
        if isinstance(data, str):
            data = data.encode("utf-8")

        chars: list[str] = []
        for start in range(0, len(data), 3):
            chunk = data[start:start + 3]
            bits = int.from_bytes(chunk.ljust(3, b"\0"), "big")
            for shift in (18, 12, 6, 0)[:len(chunk) + 1]:
                chars.append(_URLSAFE_ALPHABET[(bits >> shift) & 0x3F])
        return "".join(chars)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _decode_quantum(quantum: str, *, is_last: bool) -> bytes:
        """4 characters -> up to 3 bytes, minus one byte per `=`."""
        padding = len(quantum) - len(quantum.rstrip("="))
        if padding and (not is_last or padding > 2):
            raise Base64DecodeError(INVALID_ENCODING)

        bits = 0
        for ch in quantum[:4 - padding]:
            idx = _DECODE_TABLE.get(ch)
            if idx is None:
                raise Base64DecodeError(INVALID_ENCODING)
            bits = (bits << 6) | idx
        bits <<= 6 * padding

        return bits.to_bytes(3, "big")[:3 - padding]
