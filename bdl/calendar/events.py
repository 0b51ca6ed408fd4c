"""
Calendar events and the month grid.

Weeks start on Monday. The grid of a month covers whole weeks, from the
Monday on or before the 1st to the Sunday on or after the last day.
"""
import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Any, Dict, List, Optional, Sequence

from bdl.core.exceptions import ValidationError
from bdl.utils.dates import MONTHS_FR, parse_iso_date

logger = logging.getLogger(__name__)

TABLE = "calendar_events"


@dataclass
class CalendarEvent:
    id: int
    title: str
    start_date: date
    end_date: date
    description: str = ""
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def all_day(self) -> bool:
        return self.start_time is None

    def occurs_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarEvent":
        """
        Raises:
            ValidationError: If start_date is missing or unparseable
        """
        start = parse_iso_date(record.get("start_date"))
        if start is None:
            raise ValidationError(
                "Event has no valid start date",
                field_name="start_date",
                field_value=record.get("start_date"),
            )
        end = parse_iso_date(record.get("end_date")) or start
        return cls(
            id=record.get("id"),
            title=record.get("title") or "",
            description=record.get("description") or "",
            start_date=start,
            end_date=end,
            start_time=_parse_time(record.get("start_time")),
            end_time=_parse_time(record.get("end_time")),
        )


def _parse_time(value: Any) -> Optional[time]:
    if isinstance(value, time):
        return value
    if not value:
        return None
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning(f"Ignoring invalid event time {value!r}")
        return None


def month_grid(year: int, month: int) -> List[date]:
    """All days displayed for a month, whole Monday-to-Sunday weeks."""
    first = date(year, month, 1)
    next_month = date(year + month // 12, month % 12 + 1, 1)
    last = next_month - timedelta(days=1)

    start = first - timedelta(days=first.weekday())
    end = last + timedelta(days=6 - last.weekday())
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def events_for_day(events: Sequence[CalendarEvent], day: date) -> List[CalendarEvent]:
    return [e for e in events if e.occurs_on(day)]


def month_title(year: int, month: int) -> str:
    return f"{MONTHS_FR[month - 1].capitalize()} {year}"


def shift_month(year: int, month: int, delta: int) -> tuple:
    """(year, month) moved by `delta` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def load_events(store) -> List[CalendarEvent]:
    """All events ordered by start date; rows without a valid start date are skipped."""
    rows = store.table(TABLE).select("*").order("start_date", ascending=True).execute()
    events = []
    for row in rows:
        try:
            events.append(CalendarEvent.from_record(row))
        except ValidationError as e:
            logger.warning(f"Skipping calendar event {row.get('id')}: {e}")
    return events
