"""Runtime exceptions raised by generated clients."""

from __future__ import annotations

from typing import Any


class UnhandledStatusCode(Exception):
    """Raised when no declared status pattern matches a response.

    The full response body is kept for diagnosis.
    """

    def __init__(self, status_code: int, body: str, response: Any = None) -> None:
        self.status_code = status_code
        self.body = body
        self.response = response
        super().__init__(f"Unhandled response status code {status_code}: {body}")
