"""Exception types raised by the image_etl pipeline.

Size mismatches are deliberately absent: ``Decoded.add`` and the transformers
report them through return values so a batch can skip one bad record.
"""

from __future__ import annotations

from pydantic import ValidationError


class ConfigurationError(ValueError):
    """A configuration document is missing a field or holds an invalid value."""

    @classmethod
    def from_validation(
        cls, name: str, exc: ValidationError
    ) -> ConfigurationError:
        """Flatten a pydantic ``ValidationError`` into one readable message."""
        problems = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            msg = err["msg"]
            problems.append(f"{loc}: {msg}" if loc else msg)
        return cls(f"invalid {name} config: " + "; ".join(problems))


class UnsupportedPolicyError(NotImplementedError):
    """A configured policy exists in the schema but has no implementation."""


class DecodeError(ValueError):
    """Encoded bytes could not be turned into an image matrix."""


class TransportError(RuntimeError):
    """A remote block fetch failed.

    Args:
        url: The request URL, including query parameters.
        status: HTTP status code, or 0 when no response was received.
        reason: Underlying failure description.
    """

    def __init__(self, url: str, status: int, reason: str) -> None:
        super().__init__(
            f"HTTP GET on {url} failed. status code: {status}. {reason}"
        )
        self.url = url
        self.status = status
        self.reason = reason
