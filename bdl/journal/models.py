"""
Official journal data model.

JournalEntry rows come from the `official_journal` table. The
`modifications` column holds a JSON array of edit events:

    {"date": "2025-03-05T10:00:00Z",
     "diff": [{"value": "...", "added": true}, {"value": "...", "removed": true}, ...]}

Records are parsed leniently: a malformed modification degrades to an
empty diff rather than failing the whole entry.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from bdl.utils.dates import parse_iso_date

logger = logging.getLogger(__name__)


class PartKind(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffPart:
    """One span of an edit: text that was kept, inserted or deleted."""
    value: str
    kind: PartKind = PartKind.UNCHANGED

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "DiffPart":
        # A part flagged both ways counts as removed
        if record.get("removed"):
            kind = PartKind.REMOVED
        elif record.get("added"):
            kind = PartKind.ADDED
        else:
            kind = PartKind.UNCHANGED
        return cls(value=record["value"], kind=kind)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"value": self.value}
        if self.kind is PartKind.ADDED:
            record["added"] = True
        elif self.kind is PartKind.REMOVED:
            record["removed"] = True
        return record


@dataclass
class Modification:
    """A recorded edit of an article body, oldest first in an entry."""
    date: Optional[datetime] = None
    parts: List[DiffPart] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.parts

    @classmethod
    def from_record(cls, record: Any) -> "Modification":
        if not isinstance(record, dict):
            logger.debug(f"Skipping modification record of type {type(record).__name__}")
            return cls()

        parts: List[DiffPart] = []
        raw_parts = record.get("diff")
        if isinstance(raw_parts, list):
            for raw in raw_parts:
                if not isinstance(raw, dict) or not isinstance(raw.get("value"), str):
                    logger.debug(f"Skipping malformed diff part: {raw!r}")
                    continue
                parts.append(DiffPart.from_record(raw))

        return cls(date=_parse_datetime(record.get("date")), parts=parts)

    def to_record(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat() if self.date else None,
            "diff": [p.to_record() for p in self.parts],
        }


@dataclass
class JournalEntry:
    """Represents one publication of the official journal."""
    id: str
    title: str
    nor_number: str
    body_html: str = ""
    publication_date: Optional[date] = None
    author_name: Optional[str] = None
    author_role: Optional[str] = None
    modifications: List[Modification] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "JournalEntry":
        raw_modifications = record.get("modifications") or []
        if not isinstance(raw_modifications, list):
            logger.warning(
                f"Entry {record.get('nor_number')}: modifications is not a list, ignoring"
            )
            raw_modifications = []

        return cls(
            id=str(record.get("id", "")),
            title=record.get("title") or "",
            nor_number=record.get("nor_number") or "",
            body_html=record.get("content") or "",
            publication_date=parse_iso_date(record.get("publication_date")),
            author_name=record.get("author_name"),
            author_role=record.get("author_role"),
            modifications=[Modification.from_record(m) for m in raw_modifications],
        )

    def modifications_record(self) -> List[Dict[str, Any]]:
        return [m.to_record() for m in self.modifications]


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        d = parse_iso_date(text)
        return datetime(d.year, d.month, d.day) if d else None
