"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_HANDLE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9\-_]*$")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or not _EMAIL_PATTERN.match(self.value):
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value

    @property
    def normalized(self) -> str:
        """Lowercased form used for case-insensitive matching."""
        return self.value.lower()


@dataclass(frozen=True)
class PluginHandle(ValueObject):
    """Plugin or edition handle value object."""

    value: str

    def __post_init__(self):
        """Validate handle format."""
        if not self.value:
            raise ValueError("Handle cannot be empty")
        if not _HANDLE_PATTERN.match(self.value):
            raise ValueError(f"Invalid handle format: {self.value}")

    def __str__(self) -> str:
        """Return handle as string."""
        return self.value


@dataclass(frozen=True)
class Account(ValueObject):
    """
    The acting principal.

    Only the id and email are needed by the license registry; API views
    build this from the authenticated user.
    """

    id: int
    email: str

    def __post_init__(self):
        if self.id is None:
            raise ValueError("Account id is required")

    @classmethod
    def from_user(cls, user) -> "Account":
        """Build an account from any user object exposing ``id`` and ``email``."""
        return cls(id=user.id, email=user.email)
