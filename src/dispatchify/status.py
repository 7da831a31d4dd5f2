"""Response keys and the status-code conditions generated for them.

A response key is one of:

- an exact status code (``"200"``, ``"404"``)
- a one-digit range wildcard (``"1XX"`` .. ``"5XX"``)
- the literal ``"default"``

Precedence between them is fixed: exact > range > default.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from .errors import ClassificationError

_EXACT_PATTERN = re.compile(r"^[1-5][0-9]{2}$")
_RANGE_PATTERN = re.compile(r"^([1-5])XX$")
DEFAULT_RESPONSE_KEY = "default"


class SpecificityTier(IntEnum):
    """Evaluation order bucket; lower values are tested first."""

    EXACT = 0
    RANGE = 1
    DEFAULT = 2


@dataclass(frozen=True)
class ResponseKey:
    text: str
    tier: SpecificityTier

    @property
    def is_default(self) -> bool:
        return self.tier is SpecificityTier.DEFAULT

    @property
    def is_range(self) -> bool:
        return self.tier is SpecificityTier.RANGE

    @property
    def range_digit(self) -> int:
        if not self.is_range:
            raise ValueError(f"{self.text!r} is not a range response key")
        return int(self.text[0])


def parse_response_key(text: str, operation: str | None = None) -> ResponseKey:
    """Parse a response key from an OpenAPI ``responses`` mapping.

    Raises:
        ClassificationError: If ``text`` is not a valid response key.
    """
    if text == DEFAULT_RESPONSE_KEY:
        return ResponseKey(text=text, tier=SpecificityTier.DEFAULT)
    if _RANGE_PATTERN.match(text):
        return ResponseKey(text=text, tier=SpecificityTier.RANGE)
    if _EXACT_PATTERN.match(text):
        return ResponseKey(text=text, tier=SpecificityTier.EXACT)
    raise ClassificationError(f"invalid response key {text!r}", operation=operation)


def match_expression(variable: str, response_key: str | ResponseKey) -> str:
    """Return the Python condition testing ``variable`` against a response key.

    Example:
        >>> match_expression("status_code", "default")
        'True'
        >>> match_expression("status_code", "4XX")
        'status_code // 100 == 4'
        >>> match_expression("status_code", "404")
        'status_code == 404'
    """
    key = response_key if isinstance(response_key, ResponseKey) else parse_response_key(response_key)
    if key.is_default:
        return "True"
    if key.is_range:
        return f"{variable} // 100 == {key.range_digit}"
    return f"{variable} == {key.text}"
