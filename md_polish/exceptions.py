"""Package-specific exception types."""

from __future__ import annotations


class PolishError(ValueError):
    """Base class for md-polish errors raised outside the text core.

    The text core itself never raises on malformed Markdown; these errors
    describe unusable inputs handed to the command line front end.
    """


class InvalidBaseURLError(PolishError):
    """Raised when a base URL cannot anchor relative references.

    Args:
        base_url: The rejected base URL.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url
        super().__init__(
            f"Base URL {base_url!r} must be absolute: a scheme, and a host for web URLs"
        )


class InputTooLargeError(PolishError):
    """Raised when a Markdown input exceeds the configured size limit.

    Args:
        source: Display name of the input (a path or ``<stdin>``).
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, source: str, max_size: int):
        self.source = source
        self.max_size = max_size
        super().__init__(f"{source} exceeds the maximum allowed size of {max_size} bytes.")
