"""
Contact data model shared by the OCR parser, the vCard parser and fusion.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

# Fields that decide whether a candidate carries anything useful.
CORE_FIELDS = ("name", "company", "email", "phone")


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


# =========================
# DATA MODEL
# =========================

@dataclass(frozen=True)
class ContactCandidate:
    """One best-guess contact produced by a single source.

    Every field is either None or a non-empty, whitespace-trimmed string.
    Emails are stored lower-cased.
    """
    name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website_or_url: Optional[str] = None
    address: Optional[str] = None
    title: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _clean(getattr(self, f.name)))
        if self.email:
            object.__setattr__(self, "email", self.email.lower())

    @property
    def has_data(self) -> bool:
        return any(getattr(self, name) for name in CORE_FIELDS)

    def with_changes(self, **changes: Any) -> "ContactCandidate":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name or "",
            "company": self.company or "",
            "email": self.email or "",
            "phone": self.phone or "",
            "website_or_url": self.website_or_url or "",
            "address": self.address or "",
            "title": self.title or "",
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ContactCandidate":
        """Build a candidate from a loosely-typed mapping (JSON body, form)."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if "website" in data and "website_or_url" not in values:
            values["website_or_url"] = data["website"]
        return cls(**values)


class ScoredLine(NamedTuple):
    """A line competing for a field, with its heuristic score."""
    text: str
    score: int
    position: int


class ExtractionOutcome(Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"

    @classmethod
    def of(cls, candidate: Optional[ContactCandidate]) -> "ExtractionOutcome":
        if candidate is None:
            return cls.EMPTY
        found = sum(1 for name in CORE_FIELDS if getattr(candidate, name))
        if found == 0:
            return cls.EMPTY
        if found == len(CORE_FIELDS):
            return cls.COMPLETE
        return cls.PARTIAL
