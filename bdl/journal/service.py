"""
Official journal data access.

Reads and writes the `official_journal` table through the store client.
Body edits have two explicit paths:

- amend(): records the text changes as Modifications and stores the new
  body together with the extended modifications list;
- overwrite(): replaces the body directly and records nothing.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from bdl.auth.roles import UserSession
from bdl.core.exceptions import NotFoundError, ValidationError
from bdl.journal.article import text_nodes
from bdl.journal.diff_render import diff_nodes
from bdl.journal.models import JournalEntry, Modification

logger = logging.getLogger(__name__)

TABLE = "official_journal"
LISTING_COLUMNS = "id,title,nor_number,publication_date,author_name,author_role"


def search_by_nor(entries: Sequence[JournalEntry], term: str) -> List[JournalEntry]:
    """Entries whose NOR contains `term`, case-insensitively; a blank term keeps all."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(entries)
    return [e for e in entries if needle in e.nor_number.lower()]


class JournalService:
    """Operations on official journal entries."""

    def __init__(self, store):
        """
        Initialize the service.

        Args:
            store: StoreClient (or any object with the same table() API)
        """
        self.store = store

    def list_entries(self) -> List[JournalEntry]:
        """Listing of all entries, most recent publication first (bodies not loaded)."""
        rows = (
            self.store.table(TABLE)
            .select(LISTING_COLUMNS)
            .order("publication_date", ascending=False)
            .execute()
        )
        logger.info(f"Loaded {len(rows)} journal entries")
        return [JournalEntry.from_record(row) for row in rows]

    def get_by_nor(self, nor_number: str) -> JournalEntry:
        """
        Load one entry with its body and modifications.

        Raises:
            NotFoundError: If no entry has this NOR
            StoreError: If the request fails
        """
        row = (
            self.store.table(TABLE)
            .select("*")
            .eq("nor_number", nor_number)
            .maybe_single()
            .execute()
        )
        if row is None:
            raise NotFoundError(
                "Aucune publication trouvée pour ce numéro NOR.",
                table=TABLE,
                key=nor_number,
            )
        return JournalEntry.from_record(row)

    def publish(
        self,
        session: UserSession,
        title: str,
        nor_number: str,
        body_html: str,
        publication_date: Union[str, date],
    ) -> JournalEntry:
        """
        Insert a new entry signed by the session's user.

        Raises:
            ValidationError: If a required field is empty
        """
        fields = {
            "title": title,
            "nor_number": nor_number,
            "content": body_html,
            "publication_date": publication_date,
        }
        for name, value in fields.items():
            if not value or (isinstance(value, str) and not value.strip()):
                raise ValidationError("Veuillez remplir tous les champs", field_name=name)

        if isinstance(publication_date, date):
            fields["publication_date"] = publication_date.isoformat()

        record = dict(
            fields,
            author_id=session.user_id,
            author_name=session.full_name,
            author_role=session.role_for_publication(),
            modifications=[],
        )
        rows = self.store.table(TABLE).insert(record).execute()
        logger.info(f"Published journal entry {nor_number}")
        return JournalEntry.from_record(rows[0] if rows else record)

    def amend(
        self,
        entry: JournalEntry,
        new_body_html: str,
        when: Optional[datetime] = None,
    ) -> JournalEntry:
        """
        Replace the body and record the change as new Modifications.

        The two bodies are compared text node by text node; every changed
        node adds one Modification, trimmed to its changed region, so each
        one can be marked inline in the new body. When no text changes
        (markup-only edit) nothing is appended.
        """
        diffs = diff_nodes(text_nodes(entry.body_html), text_nodes(new_body_html))
        stamp = when or datetime.now(timezone.utc)
        modifications = list(entry.modifications)
        modifications.extend(Modification(date=stamp, parts=parts) for parts in diffs)
        if not diffs:
            logger.info(f"Amendment of {entry.nor_number} changes no text, no modification recorded")

        updated = JournalEntry(
            id=entry.id,
            title=entry.title,
            nor_number=entry.nor_number,
            body_html=new_body_html,
            publication_date=entry.publication_date,
            author_name=entry.author_name,
            author_role=entry.author_role,
            modifications=modifications,
        )
        self._update(entry.id, {
            "content": new_body_html,
            "modifications": updated.modifications_record(),
        })
        logger.info(f"Amended journal entry {entry.nor_number} ({len(modifications)} modification(s))")
        return updated

    def overwrite(self, entry: JournalEntry, fields: Dict[str, Any]) -> None:
        """
        Update columns directly, body included, without recording a modification.
        """
        if "content" in fields:
            logger.warning(
                f"Overwriting body of {entry.nor_number} without recording a modification"
            )
        self._update(entry.id, fields)

    def delete(self, entry_id: str) -> None:
        self.store.table(TABLE).delete().eq("id", entry_id).execute()
        logger.info(f"Deleted journal entry {entry_id}")

    def _update(self, entry_id: str, values: Dict[str, Any]) -> None:
        self.store.table(TABLE).update(values).eq("id", entry_id).execute()
