"""
iCalendar (RFC 5545) export of calendar events.
"""
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Sequence

from bdl.calendar.events import CalendarEvent
from bdl.core.config import CALENDAR_NAME, CALENDAR_PRODID, CALENDAR_TIMEZONE, SITE_DOMAIN


def ics_escape(text: str) -> str:
    """Escape backslash, semicolon, comma and newline."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def strip_html(html: str) -> str:
    """Remove HTML tags (DESCRIPTION is plain text)."""
    if not html:
        return ""
    return re.sub(r"<[^>]*>", "", html).strip()


def ics_date(d: date) -> str:
    return d.strftime("%Y%m%d")


def ics_datetime(d: date, t: time) -> str:
    return f"{d.strftime('%Y%m%d')}T{t.strftime('%H%M%S')}"


def build_ics(
    events: Sequence[CalendarEvent],
    now: Optional[datetime] = None,
    domain: str = SITE_DOMAIN,
) -> str:
    """
    Build a full .ics document.

    Timed events use local date-times; all-day events use VALUE=DATE with
    an exclusive end, the day after end_date.
    """
    stamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    dtstamp = stamp.strftime("%Y%m%dT%H%M%SZ")

    lines: List[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{CALENDAR_PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{CALENDAR_NAME}",
        f"X-WR-TIMEZONE:{CALENDAR_TIMEZONE}",
    ]

    for event in events:
        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:bdl-cal-{event.id}@{domain}")
        lines.append(f"SUMMARY:{ics_escape(event.title)}")
        lines.append(f"DESCRIPTION:{ics_escape(strip_html(event.description))}")

        if event.start_time is not None:
            lines.append(f"DTSTART:{ics_datetime(event.start_date, event.start_time)}")
        else:
            lines.append(f"DTSTART;VALUE=DATE:{ics_date(event.start_date)}")

        if event.end_time is not None:
            lines.append(f"DTEND:{ics_datetime(event.end_date, event.end_time)}")
        else:
            lines.append(f"DTEND;VALUE=DATE:{ics_date(event.end_date + timedelta(days=1))}")

        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")
    return "\r\n".join(lines)
