"""
Vote tally of a closed scrutin.

    exprimés          = pour + contre        (abstentions are not expressed)
    majorité absolue  = exprimés // 2 + 1
    adopté            = pour >= majorité absolue

With no expressed vote there is no adoption result at all.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

BADGE_ADOPTED = "SCRUTIN ADOPTÉ"
BADGE_REJECTED = "SCRUTIN REJETÉ"
LABEL_NO_EXPRESSED_VOTE = "AUCUN SUFFRAGE EXPRIMÉ"


class VoteChoice(str, Enum):
    POUR = "pour"
    CONTRE = "contre"
    ABSTENTION = "abstention"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class VoteTally:
    pour: int = 0
    contre: int = 0
    abstention: int = 0

    @property
    def votants(self) -> int:
        return self.pour + self.contre + self.abstention

    @property
    def exprimes(self) -> int:
        return self.pour + self.contre

    @property
    def majorite_absolue(self) -> int:
        return self.exprimes // 2 + 1

    @property
    def est_adopte(self) -> Optional[bool]:
        """True/False once votes are expressed, None when exprimés is 0."""
        if self.exprimes == 0:
            return None
        return self.pour >= self.majorite_absolue

    def adoption_badge(self) -> Optional[str]:
        """Adoption badge text; None means no badge is shown."""
        adopted = self.est_adopte
        if adopted is None:
            return None
        return BADGE_ADOPTED if adopted else BADGE_REJECTED

    def status_label(self) -> str:
        return self.adoption_badge() or LABEL_NO_EXPRESSED_VOTE

    @classmethod
    def from_votes(cls, votes: Iterable[Dict[str, Any]]) -> "VoteTally":
        """Count `vote` fields of scrutin_votes rows; unknown values are skipped."""
        counts = {choice: 0 for choice in VoteChoice}
        for row in votes:
            try:
                counts[VoteChoice(row.get("vote"))] += 1
            except ValueError:
                logger.warning(f"Ignoring unknown vote value {row.get('vote')!r}")
        return cls(
            pour=counts[VoteChoice.POUR],
            contre=counts[VoteChoice.CONTRE],
            abstention=counts[VoteChoice.ABSTENTION],
        )
