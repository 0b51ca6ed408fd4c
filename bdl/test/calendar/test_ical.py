"""
Tests for the iCalendar export (bdl/calendar/ical.py)
"""

from datetime import date, datetime, time, timezone

import pytest

from bdl.calendar.events import CalendarEvent
from bdl.calendar.ical import build_ics, ics_escape, strip_html

NOW = datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)


def lines_of(ics: str):
    return ics.split("\r\n")


class TestEscaping:
    def test_ics_escape(self):
        assert ics_escape("a,b;c\\d\ne") == "a\\,b\\;c\\\\d\\ne"

    def test_strip_html(self):
        assert strip_html("<p>Salle <b>B12</b></p>") == "Salle B12"
        assert strip_html("") == ""
        assert strip_html(None) == ""


class TestBuildIcs:
    """Tests for build_ics."""

    def test_empty_calendar(self):
        lines = lines_of(build_ics([], now=NOW))
        assert lines[0] == "BEGIN:VCALENDAR"
        assert "VERSION:2.0" in lines
        assert "X-WR-TIMEZONE:Europe/Paris" in lines
        assert lines[-1] == "END:VCALENDAR"
        assert "BEGIN:VEVENT" not in lines

    def test_crlf_line_endings(self):
        ics = build_ics([], now=NOW)
        assert "\r\n" in ics
        assert "\n" not in ics.replace("\r\n", "")

    def test_all_day_event_exclusive_end(self):
        event = CalendarEvent(id=7, title="Voyage", start_date=date(2025, 3, 5), end_date=date(2025, 3, 7))
        lines = lines_of(build_ics([event], now=NOW, domain="example.org"))
        assert "UID:bdl-cal-7@example.org" in lines
        assert "DTSTART;VALUE=DATE:20250305" in lines
        assert "DTEND;VALUE=DATE:20250308" in lines
        assert "DTSTAMP:20250301T123000Z" in lines

    def test_timed_event(self):
        event = CalendarEvent(
            id=8, title="CVL", start_date=date(2025, 3, 5), end_date=date(2025, 3, 5),
            start_time=time(14, 0), end_time=time(16, 30),
        )
        lines = lines_of(build_ics([event], now=NOW))
        assert "DTSTART:20250305T140000" in lines
        assert "DTEND:20250305T163000" in lines

    def test_summary_and_description_escaped(self):
        event = CalendarEvent(
            id=9, title="Réunion, bureau", start_date=date(2025, 3, 5), end_date=date(2025, 3, 5),
            description="<p>Ordre du jour; budget</p>",
        )
        lines = lines_of(build_ics([event], now=NOW))
        assert "SUMMARY:Réunion\\, bureau" in lines
        assert "DESCRIPTION:Ordre du jour\\; budget" in lines

    def test_one_vevent_per_event(self):
        events = [
            CalendarEvent(id=i, title=str(i), start_date=date(2025, 3, i), end_date=date(2025, 3, i))
            for i in (1, 2, 3)
        ]
        lines = lines_of(build_ics(events, now=NOW))
        assert lines.count("BEGIN:VEVENT") == 3
        assert lines.count("END:VEVENT") == 3
