"""Route HTTP responses to per-status callbacks.

A status pattern is three characters over [0-9x] ("200", "4xx") or the literal
"default". Wildcards span 0-9, so "4xx" covers 400..499. The first ranged
pattern in declared order that contains the status wins; "default" is used
only when none does.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Final, Iterable

import httpx

from .errors import UnhandledStatusCode
from .serialization import from_json

logger = logging.getLogger(__name__)

DEFAULT_PATTERN: Final = "default"

_PATTERN_RE = re.compile(r"^[0-9x]{3}$")


def is_status_pattern(pattern: str) -> bool:
    """True for "default" and for three-character [0-9x] patterns (case-insensitive)."""
    return pattern == DEFAULT_PATTERN or bool(_PATTERN_RE.match(pattern.lower()))


def status_range(pattern: str) -> tuple[int, int]:
    """Inclusive status range of a pattern, e.g. "4xx" -> (400, 499)."""
    normalized = pattern.lower()
    if not _PATTERN_RE.match(normalized):
        raise ValueError(f"Invalid status code pattern: {pattern!r}")
    return int(normalized.replace("x", "0")), int(normalized.replace("x", "9"))


def match_status(patterns: Iterable[str], status_code: int) -> str | None:
    """The pattern that handles status_code, or None if nothing matches."""
    has_default = False
    for pattern in patterns:
        if pattern == DEFAULT_PATTERN:
            has_default = True
            continue
        low, high = status_range(pattern)
        if low <= status_code <= high:
            return pattern
    return DEFAULT_PATTERN if has_default else None


def is_json_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


@dataclass(frozen=True)
class ResponseCase:
    """One declared response: its pattern, callback attribute and body type.

    type is the decoded body type (Item, list[Item], str, ...) or None when
    the response declares no content.
    """
    pattern: str
    callback: str
    type: Any = None
    content_type: str | None = None


class ResponseDispatcher:
    """Base class of generated response handlers.

    Subclasses list their ResponseCases in `responses` and declare one
    settable callback attribute per case.
    """

    responses: ClassVar[tuple[ResponseCase, ...]] = ()

    def handle_response(self, response: httpx.Response) -> Any:
        """Decode the body for the matching case and invoke its callback."""
        pattern = match_status((case.pattern for case in self.responses), response.status_code)
        if pattern is None:
            raise UnhandledStatusCode(response.status_code, response.text, response)
        case = next(case for case in self.responses if case.pattern == pattern)
        body = self.decode(case, response)
        callback = getattr(self, case.callback, None)
        if callback is None:
            logger.debug("No callback set for status %s (%s)", response.status_code, pattern)
            return body
        callback(body)
        return body

    def decode(self, case: ResponseCase, response: httpx.Response) -> Any:
        if case.type is None or not response.content:
            return None
        content_type = response.headers.get("content-type") or case.content_type
        if is_json_content_type(content_type):
            return from_json(response.json(), case.type)
        return response.text
