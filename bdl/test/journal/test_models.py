"""
Tests for the journal data model (bdl/journal/models.py)
"""

from datetime import date, datetime, timezone

import pytest

from bdl.journal.models import DiffPart, JournalEntry, Modification, PartKind


class TestDiffPart:
    def test_unchanged_by_default(self):
        assert DiffPart.from_record({"value": "x"}).kind is PartKind.UNCHANGED

    def test_added(self):
        assert DiffPart.from_record({"value": "x", "added": True}).kind is PartKind.ADDED

    def test_removed(self):
        assert DiffPart.from_record({"value": "x", "removed": True}).kind is PartKind.REMOVED

    def test_both_flags_count_as_removed(self):
        part = DiffPart.from_record({"value": "x", "added": True, "removed": True})
        assert part.kind is PartKind.REMOVED

    def test_false_flags(self):
        part = DiffPart.from_record({"value": "x", "added": False, "removed": False})
        assert part.kind is PartKind.UNCHANGED

    def test_to_record(self):
        assert DiffPart("x", PartKind.ADDED).to_record() == {"value": "x", "added": True}
        assert DiffPart("x", PartKind.REMOVED).to_record() == {"value": "x", "removed": True}
        assert DiffPart("x").to_record() == {"value": "x"}


class TestModification:
    """Tests for Modification.from_record."""

    def test_full_record(self):
        mod = Modification.from_record({
            "date": "2025-03-05T10:00:00Z",
            "diff": [{"value": "a"}, {"value": "b", "added": True}],
        })
        assert mod.date == datetime(2025, 3, 5, 10, 0, tzinfo=timezone.utc)
        assert [p.value for p in mod.parts] == ["a", "b"]
        assert mod.is_empty is False

    def test_date_only(self):
        mod = Modification.from_record({"date": "2025-03-05", "diff": []})
        assert mod.date.date() == date(2025, 3, 5)
        assert mod.is_empty

    def test_missing_diff(self):
        mod = Modification.from_record({"date": "2025-03-05"})
        assert mod.parts == []

    def test_diff_not_a_list(self):
        assert Modification.from_record({"diff": "oops"}).parts == []

    def test_malformed_parts_skipped(self):
        mod = Modification.from_record({
            "diff": [{"value": "ok"}, "bad", {"value": 3}, {"added": True}],
        })
        assert [p.value for p in mod.parts] == ["ok"]

    def test_invalid_date(self):
        assert Modification.from_record({"date": "not a date", "diff": []}).date is None

    def test_record_not_a_dict(self):
        mod = Modification.from_record(None)
        assert mod.is_empty
        assert mod.date is None

    def test_to_record_shape(self):
        mod = Modification(
            date=datetime(2025, 3, 5, 10, 0),
            parts=[DiffPart("a"), DiffPart("b", PartKind.REMOVED)],
        )
        assert mod.to_record() == {
            "date": "2025-03-05T10:00:00",
            "diff": [{"value": "a"}, {"value": "b", "removed": True}],
        }


class TestJournalEntry:
    """Tests for JournalEntry.from_record."""

    def test_from_row(self):
        entry = JournalEntry.from_record({
            "id": "e1",
            "title": "Décision n°1",
            "nor_number": "BDL2025-001",
            "content": "<p>Texte</p>",
            "publication_date": "2025-01-15",
            "author_name": "Camille",
            "author_role": "president",
            "modifications": [{"date": "2025-02-01", "diff": [{"value": "x"}]}],
        })
        assert entry.id == "e1"
        assert entry.nor_number == "BDL2025-001"
        assert entry.body_html == "<p>Texte</p>"
        assert entry.publication_date == date(2025, 1, 15)
        assert len(entry.modifications) == 1

    def test_listing_row_without_body(self):
        entry = JournalEntry.from_record({"id": 7, "title": "T", "nor_number": "N"})
        assert entry.id == "7"
        assert entry.body_html == ""
        assert entry.modifications == []

    def test_modifications_not_a_list(self):
        entry = JournalEntry.from_record({"id": "e", "modifications": {"date": "x"}})
        assert entry.modifications == []

    def test_modifications_null(self):
        entry = JournalEntry.from_record({"id": "e", "modifications": None})
        assert entry.modifications == []
