"""Generation-time exceptions.

Every error here is fatal for the unit being generated. The offending schema
or operation is carried in ``location`` and shown as ``[location] message``.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base exception for malformed or unsupported input documents."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format())

    def _format(self) -> str:
        return self.message if not self.location else f"[{self.location}] {self.message}"

    def within(self, location: str) -> GeneratorError:
        """Prefix the location of the enclosing unit and return self for re-raising."""
        self.location = f"{location} > {self.location}" if self.location else location
        self.args = (self._format(),)
        return self


class UnknownReference(GeneratorError):
    """Raised when a local schema reference names no registered schema."""

    def __init__(self, ref: str, location: str | None = None) -> None:
        self.ref = ref
        super().__init__(f"Unknown schema reference '{ref}'", location)


class UnsupportedReference(GeneratorError):
    """Raised for references outside '#/components/schemas/'."""

    def __init__(self, ref: str, location: str | None = None) -> None:
        self.ref = ref
        super().__init__(f"External references not supported: '{ref}'", location)


class MissingArrayItemSchema(GeneratorError):
    """Raised when an array schema declares no 'items'."""

    def __init__(self, location: str | None = None) -> None:
        super().__init__("Array schema is missing 'items'", location)


class MissingTypeName(GeneratorError):
    """Raised when an object type needs a name but has no title or default."""

    def __init__(self, location: str | None = None) -> None:
        super().__init__(
            "Creating a named object type requires a title or default name", location,
        )


class MalformedSecurityScheme(GeneratorError):
    """Raised when an apiKey security scheme lacks 'in' or 'name', or has a bad 'in'."""

    def __init__(self, scheme_name: str, problem: str) -> None:
        self.scheme_name = scheme_name
        super().__init__(f"SecurityScheme {problem}", scheme_name)
