"""
Scrutins: listing, search, grouping by month, voting and results.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from bdl.auth.roles import RoleName, UserSession, parse_roles, primary_role
from bdl.core.exceptions import PermissionDeniedError, ValidationError
from bdl.scrutin.tally import VoteChoice, VoteTally
from bdl.utils.dates import format_period_fr

logger = logging.getLogger(__name__)

SCRUTINS_TABLE = "scrutins"
VOTES_TABLE = "scrutin_votes"

VOTER_COLUMNS = "user_id,vote,profiles!scrutin_votes_user_id_fkey(full_name,user_roles(role))"

DEFAULT_VOTER_LABEL = "Membre BDL"

VOTER_ROLE_LABELS = {
    RoleName.PRESIDENT: "Président",
    RoleName.VICE_PRESIDENT: "Vice-Présidente",
    RoleName.SECRETARY_GENERAL: "Secrétaire Générale",
    RoleName.COMMUNICATION_MANAGER: "Directeur de la Communication",
    RoleName.BDL_MEMBER: DEFAULT_VOTER_LABEL,
}


@dataclass
class Scrutin:
    id: str
    title: str
    description: str = ""
    status: str = "open"  # 'open' or 'closed'
    is_secret: bool = False
    created_at: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Scrutin":
        return cls(
            id=str(record.get("id", "")),
            title=record.get("title") or "",
            description=record.get("description") or "",
            status=record.get("status") or "open",
            is_secret=bool(record.get("is_secret")),
            created_at=record.get("created_at"),
        )


@dataclass
class VoteDetail:
    """One member's vote as listed under the result of a public scrutin."""
    user_id: str
    full_name: str
    role_label: str
    vote: VoteChoice


def voter_role_label(roles: Sequence[str]) -> str:
    """Label of a voter's most significant standard role; custom roles are ignored."""
    return VOTER_ROLE_LABELS.get(primary_role(parse_roles(roles)), DEFAULT_VOTER_LABEL)


def filter_scrutins(scrutins: Sequence[Scrutin], query: str) -> List[Scrutin]:
    """Scrutins whose title or description contains `query`, case-insensitively."""
    needle = (query or "").lower()
    return [
        s for s in scrutins
        if needle in s.title.lower() or needle in s.description.lower()
    ]


def group_by_period(scrutins: Sequence[Scrutin]) -> Dict[str, List[Scrutin]]:
    """
    Group scrutins under "<Mois> <année>" labels of their creation date.

    Groups appear in the order their first scrutin appears.
    """
    groups: Dict[str, List[Scrutin]] = {}
    for scrutin in scrutins:
        period = format_period_fr(scrutin.created_at) or "Date inconnue"
        groups.setdefault(period, []).append(scrutin)
    return groups


class ScrutinService:
    """Operations on scrutins and their votes."""

    def __init__(self, store):
        self.store = store

    def list_scrutins(self) -> List[Scrutin]:
        rows = (
            self.store.table(SCRUTINS_TABLE)
            .select("*")
            .order("created_at", ascending=False)
            .execute()
        )
        return [Scrutin.from_record(row) for row in rows]

    def tally(self, scrutin_id: str) -> VoteTally:
        rows = (
            self.store.table(VOTES_TABLE)
            .select("user_id,vote")
            .eq("scrutin_id", scrutin_id)
            .execute()
        )
        return VoteTally.from_votes(rows)

    def vote_details(self, scrutin: Scrutin) -> List[VoteDetail]:
        """
        Per-member votes of a closed, public scrutin.

        Secret scrutins never disclose who voted what, and open ones are not
        detailed until they close; both return an empty list.
        """
        if scrutin.is_secret or scrutin.is_open:
            return []

        rows = (
            self.store.table(VOTES_TABLE)
            .select(VOTER_COLUMNS)
            .eq("scrutin_id", scrutin.id)
            .execute()
        )
        details = []
        for row in rows:
            try:
                vote = VoteChoice(row.get("vote"))
            except ValueError:
                logger.warning(f"Ignoring unknown vote value {row.get('vote')!r}")
                continue
            profile = row.get("profiles") or {}
            roles = [r.get("role", "") for r in profile.get("user_roles") or []]
            details.append(VoteDetail(
                user_id=str(row.get("user_id", "")),
                full_name=profile.get("full_name") or "",
                role_label=voter_role_label(roles),
                vote=vote,
            ))
        return details

    def my_vote(self, session: UserSession, scrutin_id: str) -> Optional[VoteChoice]:
        row = (
            self.store.table(VOTES_TABLE)
            .select("vote")
            .eq("scrutin_id", scrutin_id)
            .eq("user_id", session.user_id)
            .maybe_single()
            .execute()
        )
        if row is None:
            return None
        try:
            return VoteChoice(row.get("vote"))
        except ValueError:
            logger.warning(f"Stored vote {row.get('vote')!r} is not a known choice")
            return None

    def cast_vote(
        self,
        session: UserSession,
        scrutin: Scrutin,
        vote: Union[str, VoteChoice],
    ) -> VoteChoice:
        """
        Record the session user's vote on an open scrutin.

        Raises:
            ValidationError: If `vote` is not pour/contre/abstention
            PermissionDeniedError: If the user may not vote, the scrutin is
                                   closed, or the user already voted
        """
        try:
            choice = VoteChoice(vote)
        except ValueError:
            raise ValidationError("Unknown vote", field_name="vote", field_value=vote) from None

        if not session.can_vote or session.is_president:
            raise PermissionDeniedError(
                "Vous n'avez pas les droits pour voter",
                action="vote",
                user_id=session.user_id,
            )
        if not scrutin.is_open:
            raise PermissionDeniedError(
                "Ce scrutin est clos",
                action="vote",
                user_id=session.user_id,
            )
        if self.my_vote(session, scrutin.id) is not None:
            raise PermissionDeniedError(
                "Vous avez déjà voté sur ce scrutin",
                action="vote",
                user_id=session.user_id,
            )

        self.store.table(VOTES_TABLE).insert({
            "scrutin_id": scrutin.id,
            "user_id": session.user_id,
            "vote": choice.value,
        }).execute()
        logger.info(f"Vote recorded on scrutin {scrutin.id}")
        return choice
