"""
License history entry.

History is append-only: entries are written once and never updated.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LicenseHistoryEntry:
    """A single note in a license's history."""

    license_id: int
    note: str
    timestamp: datetime

    def __post_init__(self):
        """Validate history entry."""
        if not self.note or len(self.note.strip()) == 0:
            raise ValueError("History note cannot be empty")
