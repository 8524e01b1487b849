"""
Core domain models for the takeout place sync.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class RecordOutcome(str, Enum):
    """Terminal state of one place in a sync run."""
    CREATED = "created"
    UPDATED = "updated"
    ERROR = "error"


@dataclass
class Place:
    """
    A saved location, normalized from either takeout format.

    (lat, lng) == (0, 0) is the sentinel for "no coordinate known".
    Optional fields are None when the source did not carry them.
    """
    id: str
    name: str
    lat: float = 0.0
    lng: float = 0.0
    url: Optional[str] = None
    address: Optional[str] = None
    memo: Optional[str] = None
    comment: Optional[str] = None
    tags: Optional[List[str]] = None
    list: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return not (self.lat == 0 and self.lng == 0)


@dataclass(frozen=True)
class DocumentRef:
    """One entry of a document store listing."""
    path: str
    modified_ns: int = 0

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class DocumentMetadata:
    """Identity and tags read back from an existing note."""
    path: str
    gmap_id: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class ImportSummary:
    """Run-level tally of created/updated/skipped/errored counts."""
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    parsed: int = 0
    files: List[str] = field(default_factory=list)

    def record(self, outcome: RecordOutcome) -> None:
        if outcome is RecordOutcome.CREATED:
            self.created += 1
        elif outcome is RecordOutcome.UPDATED:
            self.updated += 1
        else:
            self.errors += 1

    def message(self) -> str:
        parts = [f"{self.created} created", f"{self.updated} updated"]
        if self.skipped > 0:
            parts.append(f"{self.skipped} skipped")
        if self.errors > 0:
            parts.append(f"{self.errors} errors")
        return ", ".join(parts)

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "parsed": self.parsed,
            "files": list(self.files),
        }
