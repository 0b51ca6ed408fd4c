"""
Consolidated reading view of an official journal article.

The view shows the current body with every recorded modification marked
where it applies (struck-out removals, underlined insertions), the body's
collapsible heading outline, and the modifications history.
"""
import logging
from typing import List, Optional, Sequence, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from bdl.journal.diff_render import current_text, render_diff
from bdl.journal.history import ModificationsHistory
from bdl.journal.models import JournalEntry, Modification
from bdl.journal.outline import (
    HEADING_LEVELS,
    OutlineState,
    Section,
    build_sections,
    find_section,
    render_outline,
)
from bdl.utils.dates import format_date_fr

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR_LABEL = "Bureau des Lycéens"

ROLE_LABELS = {
    "president": "Le Président",
    "vice_president": "La Vice-Présidente",
    "secretary_general": "La Secrétaire Générale",
    "communication_manager": "Le Responsable Communication",
}


def get_role_label(role: Optional[str]) -> str:
    """Signature label of an author role; unknown and custom roles sign as the Bureau."""
    if not role:
        return DEFAULT_AUTHOR_LABEL
    return ROLE_LABELS.get(role, DEFAULT_AUTHOR_LABEL)


def mark_modifications(body_html: str, modifications: Sequence[Modification]) -> str:
    """
    Mark each modification inline in the body.

    For every modification, in order, the first occurrence of its current
    text inside a single text node (outside headings and outside earlier
    marks) is replaced by the rendered diff. A modification whose current
    text is not found is left unmarked. The text a reader sees as current
    is unchanged by the marking.

    Returns:
        The marked body as HTML
    """
    soup = BeautifulSoup(body_html or "", "html.parser")

    for index, modification in enumerate(modifications, start=1):
        target = current_text(modification.parts)
        if modification.is_empty or not target.strip():
            continue
        if not _mark_first_occurrence(soup, index, modification, target):
            logger.debug(f"Modification {index} not found in body, left unmarked")

    return str(soup)


def _markable_nodes(soup: BeautifulSoup) -> List[NavigableString]:
    """Plain text nodes outside headings and outside existing marks."""
    nodes = []
    for node in soup.find_all(string=True):
        if type(node) is not NavigableString:
            continue
        if node.find_parent(list(HEADING_LEVELS)) is not None:
            continue
        if node.find_parent("span", class_="modification") is not None:
            continue
        nodes.append(node)
    return nodes


def text_nodes(body_html: str) -> List[str]:
    """
    Text nodes of a body that modifications can be marked in, in document order.

    Blank nodes are left out.
    """
    soup = BeautifulSoup(body_html or "", "html.parser")
    return [str(node) for node in _markable_nodes(soup) if node.strip()]


def _mark_first_occurrence(
    soup: BeautifulSoup,
    index: int,
    modification: Modification,
    target: str,
) -> bool:
    for node in _markable_nodes(soup):
        text = str(node)
        position = text.find(target)
        if position < 0:
            continue

        mark = soup.new_tag(
            "span",
            attrs={"class": "modification", "data-modification": str(index)},
        )
        mark.append(render_diff(modification.parts, soup=soup))

        before = text[:position]
        after = text[position + len(target):]
        if before:
            node.insert_before(NavigableString(before))
        node.insert_before(mark)
        if after:
            node.insert_before(NavigableString(after))
        node.extract()
        return True
    return False


class ConsolidatedArticle:
    """
    Reading view of one journal entry.

    Holds the view's local state: which outline sections are collapsed and
    whether the history is expanded. A new instance starts fully expanded
    with the history hidden.
    """

    def __init__(self, entry: JournalEntry):
        self.entry = entry
        self.outline_state = OutlineState()
        self.history = ModificationsHistory(entry.modifications)

    def marked_body(self) -> str:
        return mark_modifications(self.entry.body_html, self.entry.modifications)

    def sections(self) -> List[Section]:
        return build_sections(self.marked_body())

    def toggle_section(self, section: Union[Section, str]) -> bool:
        """
        Collapse or expand a section, given by Section or by title.

        Returns:
            The new collapsed flag; False when no such section exists.
        """
        if isinstance(section, str):
            found = find_section(self.sections(), section)
            if found is None:
                logger.warning(f"No section titled {section!r} in {self.entry.nor_number}")
                return False
            section = found
        return self.outline_state.toggle(section)

    def toggle_history(self) -> bool:
        return self.history.toggle()

    def render(self, soup: Optional[BeautifulSoup] = None) -> Tag:
        if soup is None:
            soup = BeautifulSoup("", "html.parser")

        entry = self.entry
        article = soup.new_tag(
            "article",
            attrs={"class": "journal-article", "data-nor": entry.nor_number},
        )

        title = soup.new_tag("h1", attrs={"class": "journal-title"})
        title.string = entry.title
        article.append(title)

        meta = soup.new_tag("p", attrs={"class": "journal-meta"})
        meta_text = f"NOR : {entry.nor_number}"
        if entry.publication_date:
            meta_text += f" — publié le {format_date_fr(entry.publication_date)}"
        meta.string = meta_text
        article.append(meta)

        article.append(render_outline(self.sections(), self.outline_state, soup=soup))

        if entry.author_name:
            signature = soup.new_tag("div", attrs={"class": "journal-signature"})
            signature.string = f"{get_role_label(entry.author_role)} : {entry.author_name}"
            article.append(signature)

        history = self.history.render(soup=soup)
        if history is not None:
            article.append(history)

        return article

    def to_html(self) -> str:
        return str(self.render())
