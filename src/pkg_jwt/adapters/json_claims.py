import json
import math
from typing import Any, Dict

from ..domain.exceptions import ClaimParseError
from ..domain.ports import ClaimParser


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range for a JSON number")
    return value


class JsonClaimParser(ClaimParser):
    """
    Adapter implementing ClaimParser with the standard `json` module.

    Only strict JSON is accepted (no NaN / Infinity, and no number literal
    that overflows to one), and only an object at the top level; arrays and
    scalars are valid JSON but not a valid JOSE header or claims set.
    """

    def parse(self, raw: bytes, segment: str) -> Dict[str, Any]:
        """
        Raises:
            ClaimParseError (chained from the underlying decode error)
        """
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ClaimParseError(f"JWT {segment} is not valid UTF-8: {exc}") from exc

        try:
            value = json.loads(
                text,
                parse_constant=_reject_constant,
                parse_float=_parse_finite_float,
            )
        except ValueError as exc:
            raise ClaimParseError(f"JWT {segment} is not valid JSON: {exc}") from exc

        if not isinstance(value, dict):
            raise ClaimParseError(f"JWT {segment} must be a JSON object")

        return value
