"""
Heading outline of an article body.

The body HTML is read as a flat list of top-level nodes. Headings h1-h4
open sections; everything else is appended, as serialized markup, to the
innermost open section:

    <h1>A</h1><p>x</p><h2>B</h2><p>y</p><h1>C</h1><p>z</p>

    A  content=<p>x</p>
    └─ B  content=<p>y</p>
    C  content=<p>z</p>

A heading closes every open section of the same or a deeper level before
opening its own. Content found before the first heading becomes an
untitled level-0 section at the root, which is never collapsible.

Collapse state is held by OutlineState, keyed by a hash of each section's
path of (level, title, occurrence) from its root rather than by its index,
so adding a heading elsewhere in the body does not move the state to a
different section.
"""
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)

HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}


@dataclass
class Section:
    """A heading and the content that follows it up to the next heading of equal or higher rank."""
    title: Optional[str]
    level: int
    content_parts: List[str] = field(default_factory=list)
    children: List["Section"] = field(default_factory=list)
    key: str = ""

    @property
    def content(self) -> str:
        return "".join(self.content_parts)

    @property
    def is_intro(self) -> bool:
        """Untitled level-0 section holding content found before any heading."""
        return self.level == 0

    @property
    def collapsible(self) -> bool:
        return not self.is_intro


def build_sections(html: str) -> List[Section]:
    """
    Build the section forest of an HTML fragment.

    Only top-level nodes are inspected; the markup inside a non-heading
    element is kept as-is. Malformed HTML is read with the parser's usual
    leniency.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    roots: List[Section] = []
    path: List[Section] = []

    for node in list(soup.contents):
        if isinstance(node, Tag):
            level = HEADING_LEVELS.get(node.name)
            if level is not None:
                while path and path[-1].level >= level:
                    path.pop()
                section = Section(title=node.get_text().strip(), level=level)
                if path:
                    path[-1].children.append(section)
                else:
                    roots.append(section)
                path.append(section)
                continue
            markup = str(node)
        elif type(node) is NavigableString:
            if not node.strip():
                continue
            markup = node.output_ready(formatter="minimal")
        else:
            # comments, doctypes, processing instructions
            continue

        if path:
            path[-1].content_parts.append(markup)
        else:
            roots.append(Section(title=None, level=0, content_parts=[markup]))

    _assign_keys(roots, ())
    logger.debug(f"Built outline with {len(roots)} root section(s)")
    return roots


def _assign_keys(sections: List[Section], parent_path: Tuple[str, ...]):
    seen: Dict[Tuple[int, str], int] = {}
    for section in sections:
        ident = (section.level, section.title or "")
        occurrence = seen.get(ident, 0)
        seen[ident] = occurrence + 1

        path = parent_path + (f"{section.level}:{section.title or ''}#{occurrence}",)
        digest = hashlib.sha1("\x1f".join(path).encode("utf-8")).hexdigest()[:12]
        section.key = f"s{section.level}-{digest}"
        _assign_keys(section.children, path)


def iter_sections(sections: Sequence[Section]) -> Iterator[Section]:
    """Depth-first, document order."""
    for section in sections:
        yield section
        yield from iter_sections(section.children)


def find_section(sections: Sequence[Section], title: str) -> Optional[Section]:
    """First section (document order) whose title matches."""
    for section in iter_sections(sections):
        if section.title == title:
            return section
    return None


class OutlineState:
    """
    Collapsed sections of one displayed outline.

    A new instance has every section expanded; the state is not persisted.
    """

    def __init__(self):
        self.collapsed: Set[str] = set()

    def is_collapsed(self, section: Union[Section, str]) -> bool:
        key = section.key if isinstance(section, Section) else section
        return key in self.collapsed

    def toggle(self, section: Section) -> bool:
        """
        Flip one section's collapsed flag.

        Returns:
            The new collapsed flag (always False for an intro section,
            which cannot be collapsed).
        """
        if not section.collapsible:
            return False
        if section.key in self.collapsed:
            self.collapsed.discard(section.key)
            return False
        self.collapsed.add(section.key)
        return True


def render_outline(
    sections: Sequence[Section],
    state: OutlineState,
    soup: Optional[BeautifulSoup] = None,
) -> Tag:
    """
    Render the section forest with its toggles.

    A collapsed section keeps its heading and toggle; its content and
    child sections are left out of the output.
    """
    if soup is None:
        soup = BeautifulSoup("", "html.parser")

    outline = soup.new_tag("div", attrs={"class": "journal-outline"})
    for section in sections:
        outline.append(_render_section(soup, section, state))
    return outline


def _render_section(soup: BeautifulSoup, section: Section, state: OutlineState) -> Tag:
    if section.is_intro:
        intro = soup.new_tag("div", attrs={"class": "outline-intro"})
        _append_markup(intro, section.content)
        return intro

    collapsed = state.is_collapsed(section)
    element = soup.new_tag(
        "section",
        attrs={
            "class": "outline-section",
            "data-level": str(section.level),
            "data-section": section.key,
        },
    )

    heading = soup.new_tag(f"h{section.level}", attrs={"class": "section-heading"})
    toggle = soup.new_tag(
        "button",
        attrs={
            "type": "button",
            "class": "section-toggle",
            "aria-expanded": "false" if collapsed else "true",
            "data-section": section.key,
        },
    )
    toggle.string = section.title or ""
    heading.append(toggle)
    element.append(heading)

    if collapsed:
        return element

    if section.content_parts:
        body = soup.new_tag("div", attrs={"class": "section-content"})
        _append_markup(body, section.content)
        element.append(body)

    for child in section.children:
        element.append(_render_section(soup, child, state))
    return element


def _append_markup(parent: Tag, markup: str):
    fragment = BeautifulSoup(markup, "html.parser")
    for node in list(fragment.contents):
        parent.append(node.extract())
