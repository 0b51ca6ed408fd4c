"""
French date formatting helpers.
"""
from datetime import date, datetime
from typing import Optional, Union

MONTHS_FR = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]

DAYS_FR = ["Lun", "Mar", "Mer", "Jeu", "Ven", "Sam", "Dim"]


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse an ISO-8601 date or datetime string.

    Returns None for empty or unparseable values instead of raising.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    # fromisoformat on older interpreters rejects a trailing Z
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date_fr(value: Union[str, date, None]) -> str:
    """
    Format a date the way fr-FR long dates read, e.g. "5 mars 2025".

    Unparseable input yields an empty string.
    """
    d = parse_iso_date(value)
    if d is None:
        return ""
    return f"{d.day} {MONTHS_FR[d.month - 1]} {d.year}"


def format_period_fr(value: Union[str, date, None]) -> str:
    """Capitalised month and year, e.g. "Mars 2025"."""
    d = parse_iso_date(value)
    if d is None:
        return ""
    return f"{MONTHS_FR[d.month - 1].capitalize()} {d.year}"
