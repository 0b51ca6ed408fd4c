"""
Diff-marked text rendering.

A diff is an ordered list of DiffPart. Rendering maps each part to one
inline element, in order and without merging neighbours:

    removed   -> <del class="diff-removed">
    added     -> <ins class="diff-added">
    unchanged -> <span class="diff-unchanged">

Computing a diff between two versions of a text uses difflib's
SequenceMatcher over word and whitespace tokens.
"""
import re
from difflib import SequenceMatcher
from itertools import zip_longest
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from bdl.journal.models import DiffPart, PartKind

_TOKEN_RE = re.compile(r"\s+|[^\s]+")

_ELEMENTS = {
    PartKind.REMOVED: ("del", "diff-removed"),
    PartKind.ADDED: ("ins", "diff-added"),
    PartKind.UNCHANGED: ("span", "diff-unchanged"),
}


def current_text(parts: Iterable[DiffPart]) -> str:
    """Text after the edit: unchanged and added parts, in order."""
    return "".join(p.value for p in parts if p.kind is not PartKind.REMOVED)


def previous_text(parts: Iterable[DiffPart]) -> str:
    """Text before the edit: unchanged and removed parts, in order."""
    return "".join(p.value for p in parts if p.kind is not PartKind.ADDED)


def render_diff(
    parts: Sequence[DiffPart],
    soup: Optional[BeautifulSoup] = None,
    container: str = "span",
) -> Tag:
    """
    Render a diff as inline markup.

    Args:
        parts: Ordered diff parts
        soup: Document to create the elements in (a new one by default)
        container: Tag name of the wrapping element

    Returns:
        The container element; it has one child per part, and no child at
        all for an empty diff.
    """
    if soup is None:
        soup = BeautifulSoup("", "html.parser")

    wrapper = soup.new_tag(container, attrs={"class": "diff"})
    for part in parts:
        name, css_class = _ELEMENTS[part.kind]
        fragment = soup.new_tag(name, attrs={"class": css_class})
        fragment.string = part.value
        wrapper.append(fragment)
    return wrapper


def displayed_text(rendered: Tag) -> str:
    """Text a reader sees as current in a rendered diff (struck-out parts excluded)."""
    return "".join(
        child.get_text()
        for child in rendered.children
        if isinstance(child, Tag) and child.name != "del"
    )


def compute_diff(old: str, new: str) -> List[DiffPart]:
    """
    Compute the ordered diff turning `old` into `new`.

    Replacements are emitted as the removed text followed by the added text.
    """
    a = _TOKEN_RE.findall(old or "")
    b = _TOKEN_RE.findall(new or "")
    matcher = SequenceMatcher(None, a, b, autojunk=False)

    parts: List[DiffPart] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(DiffPart("".join(a[i1:i2]), PartKind.UNCHANGED))
        elif tag == "delete":
            parts.append(DiffPart("".join(a[i1:i2]), PartKind.REMOVED))
        elif tag == "insert":
            parts.append(DiffPart("".join(b[j1:j2]), PartKind.ADDED))
        elif tag == "replace":
            parts.append(DiffPart("".join(a[i1:i2]), PartKind.REMOVED))
            parts.append(DiffPart("".join(b[j1:j2]), PartKind.ADDED))
    return parts


def trim_context(parts: Sequence[DiffPart], separator: str = "\n") -> List[DiffPart]:
    """
    Cut a whole-document diff down to the changed region.

    Unchanged text before the first change and after the last change is
    dropped, except for the context sharing a line (up to `separator`)
    with the change. A diff with no change trims to an empty list.
    """
    changed = [i for i, p in enumerate(parts) if p.kind is not PartKind.UNCHANGED]
    if not changed:
        return []
    first, last = changed[0], changed[-1]

    trimmed: List[DiffPart] = []
    if first > 0:
        lead = parts[first - 1].value.rsplit(separator, 1)[-1]
        if lead:
            trimmed.append(DiffPart(lead, PartKind.UNCHANGED))
    trimmed.extend(parts[first:last + 1])
    if last + 1 < len(parts):
        tail = parts[last + 1].value.split(separator, 1)[0]
        if tail:
            trimmed.append(DiffPart(tail, PartKind.UNCHANGED))
    return trimmed


def diff_nodes(old: Sequence[str], new: Sequence[str]) -> List[List[DiffPart]]:
    """
    Diff two versions of a body given as lists of text nodes.

    Nodes are aligned with SequenceMatcher; unchanged nodes are skipped and
    each changed node yields its own trimmed diff, so the current text of
    every diff lies inside a single node of the new version.

    Returns:
        One diff per changed node, in document order
    """
    matcher = SequenceMatcher(None, list(old), list(new), autojunk=False)

    diffs: List[List[DiffPart]] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        for before, after in zip_longest(old[i1:i2], new[j1:j2], fillvalue=""):
            parts = trim_context(compute_diff(before, after))
            if parts:
                diffs.append(parts)
    return diffs
