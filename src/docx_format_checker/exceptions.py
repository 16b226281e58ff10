"""Error kinds raised by the formatting checker."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class FormatCheckError(Exception):
    """
    Base exception for a failed checking or extraction pass.

    Every error is terminal for the pass that raised it; callers are
    expected to surface ``category`` and ``message`` to the user as is.

    Attributes:
        message: Human-readable error description.
        location: Where in the package or rule record the problem was found.
        details: Additional error details.
    """
    message: str
    location: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    category = "error"

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.location:
            return f"{self.message} | Location: {self.location}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "category": self.category,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "location": self.location,
            "details": self.details,
        }


@dataclass
class DecodeError(FormatCheckError):
    """
    The input is not a readable Word package.

    Raised for truncated or non-zip archives, packages without a main
    document part, and parts whose XML cannot be parsed.
    """

    category = "decode"


@dataclass
class SchemaError(FormatCheckError):
    """
    The rule record is malformed.

    ``details["errors"]`` holds every problem found in the record, not
    just the first one.
    """

    category = "schema"

    @property
    def errors(self) -> list[str]:
        return list(self.details.get("errors", []))


@dataclass
class IntegrityError(FormatCheckError):
    """
    The package is readable but internally inconsistent.

    Cyclic style inheritance and references to styles or numbering
    definitions that do not exist end up here.
    """

    category = "integrity"


@dataclass
class PassStateError(FormatCheckError):
    """A checking pass was driven out of order or re-entered."""

    category = "state"
