"""
Modifications history list.

Shows every recorded edit of an article, oldest first, behind a single
show/hide toggle. An article without modifications has no history
section at all.
"""
import logging
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from bdl.journal.diff_render import render_diff
from bdl.journal.models import Modification
from bdl.utils.dates import format_date_fr

logger = logging.getLogger(__name__)


class ModificationsHistory:
    """
    History of an article's modifications with one expanded flag.

    Starts collapsed. Rendering is a pure function of the modifications
    and the flag.
    """

    def __init__(self, modifications: Sequence[Modification]):
        self.modifications: List[Modification] = list(modifications)
        self.expanded = False

    def toggle(self) -> bool:
        self.expanded = not self.expanded
        return self.expanded

    def render(self, soup: Optional[BeautifulSoup] = None) -> Optional[Tag]:
        """
        Render the history section.

        Returns:
            The <section> element, or None when no modification has a
            non-empty diff.
        """
        shown = sum(1 for m in self.modifications if not m.is_empty)
        if not shown:
            return None

        if soup is None:
            soup = BeautifulSoup("", "html.parser")

        section = soup.new_tag("section", attrs={"class": "modifications-history"})
        button = soup.new_tag(
            "button",
            attrs={
                "type": "button",
                "class": "history-toggle",
                "aria-expanded": "true" if self.expanded else "false",
            },
        )
        verb = "Masquer" if self.expanded else "Afficher"
        button.string = f"{verb} l'historique des modifications ({shown})"
        section.append(button)

        if not self.expanded:
            return section

        items = soup.new_tag("ol", attrs={"class": "modifications-list"})
        for index, modification in enumerate(self.modifications, start=1):
            if modification.is_empty:
                logger.debug(f"Modification {index} has an empty diff, not rendered")
                continue
            items.append(self._render_item(soup, index, modification))
        section.append(items)
        return section

    def _render_item(self, soup: BeautifulSoup, index: int, modification: Modification) -> Tag:
        item = soup.new_tag("li", attrs={"class": "modification", "value": str(index)})

        header = soup.new_tag("p", attrs={"class": "modification-header"})
        label = f"Modification n°{index}"
        if modification.date:
            label += f" du {format_date_fr(modification.date)}"
        header.string = label
        item.append(header)

        body = render_diff(modification.parts, soup=soup, container="div")
        item.append(body)
        return item
