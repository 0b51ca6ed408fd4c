"""
Tests for the heading outline (bdl/journal/outline.py)

Tests cover:
- Section tree building by heading level
- Content accumulation and intro sections
- Skipping of blank text and comments
- Stable section keys
- Collapse state and rendering
"""

import pytest

from bdl.journal.outline import (
    OutlineState,
    Section,
    build_sections,
    find_section,
    iter_sections,
    render_outline,
)

NESTED_HTML = "<h1>A</h1><p>x</p><h2>B</h2><p>y</p><h1>C</h1><p>z</p>"


class TestBuildSections:
    """Tests for build_sections."""

    def test_nesting_by_level(self):
        """h2 nests under the preceding h1; the next h1 closes both."""
        roots = build_sections(NESTED_HTML)

        assert [s.title for s in roots] == ["A", "C"]
        a, c = roots
        assert [s.title for s in a.children] == ["B"]
        assert a.content == "<p>x</p>"
        assert a.children[0].content == "<p>y</p>"
        assert c.content == "<p>z</p>"
        assert c.children == []

    def test_levels_from_tag(self):
        roots = build_sections("<h1>a</h1><h2>b</h2><h3>c</h3><h4>d</h4>")
        levels = [s.level for s in iter_sections(roots)]
        assert levels == [1, 2, 3, 4]
        assert len(roots) == 1

    def test_same_level_headings_are_siblings(self):
        roots = build_sections("<h2>A</h2><p>1</p><h2>B</h2><p>2</p>")
        assert [s.title for s in roots] == ["A", "B"]
        assert roots[0].children == []

    def test_deeper_heading_closes_until_lower_level(self):
        """An h2 after an h3 pops the h3 and the previous h2."""
        roots = build_sections("<h1>A</h1><h2>B</h2><h3>C</h3><h2>D</h2>")
        a = roots[0]
        assert [s.title for s in a.children] == ["B", "D"]
        assert [s.title for s in a.children[0].children] == ["C"]

    def test_skipped_level_still_nests(self):
        roots = build_sections("<h1>A</h1><h3>B</h3>")
        assert roots[0].children[0].title == "B"
        assert roots[0].children[0].level == 3

    def test_intro_content_before_first_heading(self):
        roots = build_sections("<p>intro</p><h2>A</h2><p>x</p>")

        intro = roots[0]
        assert intro.title is None
        assert intro.level == 0
        assert intro.is_intro is True
        assert intro.collapsible is False
        assert intro.content == "<p>intro</p>"
        assert intro.children == []

        assert roots[1].title == "A"
        assert roots[1].content == "<p>x</p>"

    def test_intro_is_not_attached_to_later_heading(self):
        roots = build_sections("<p>intro</p><h1>A</h1>")
        assert len(roots) == 2
        assert roots[1].children == []

    def test_blank_text_is_skipped(self):
        roots = build_sections("\n  <h1>A</h1>\n\n<p>x</p>\n")
        assert len(roots) == 1
        assert roots[0].content == "<p>x</p>"

    def test_text_node_is_appended(self):
        roots = build_sections("<h1>A</h1>plain text")
        assert roots[0].content == "plain text"

    def test_text_node_is_escaped(self):
        roots = build_sections("<h1>A</h1>a &lt; b")
        assert roots[0].content == "a &lt; b"

    def test_comment_is_skipped(self):
        roots = build_sections("<h1>A</h1><!-- note --><p>x</p>")
        assert roots[0].content == "<p>x</p>"

    def test_inner_markup_is_kept_verbatim(self):
        """Headings nested inside other elements are content, not sections."""
        html = '<h1>A</h1><div class="box"><h2>inner</h2><p><b>x</b></p></div>'
        roots = build_sections(html)
        assert len(roots) == 1
        assert roots[0].children == []
        assert roots[0].content == '<div class="box"><h2>inner</h2><p><b>x</b></p></div>'

    def test_h5_is_content(self):
        roots = build_sections("<h1>A</h1><h5>small</h5>")
        assert roots[0].content == "<h5>small</h5>"

    def test_heading_title_is_text(self):
        roots = build_sections("<h1> Titre <em>premier</em> </h1>")
        assert roots[0].title == "Titre premier"

    def test_empty_html(self):
        assert build_sections("") == []
        assert build_sections(None) == []

    def test_malformed_html_does_not_raise(self):
        roots = build_sections("<h1>A<p>unclosed <b>bold</h1><p>x")
        assert isinstance(roots, list)


class TestSectionKeys:
    """Tests for structural section keys."""

    def test_keys_are_unique(self):
        roots = build_sections(NESTED_HTML + "<h1>A</h1>")
        keys = [s.key for s in iter_sections(roots)]
        assert len(keys) == len(set(keys))
        assert all(keys)

    def test_keys_are_stable_across_builds(self):
        first = [s.key for s in iter_sections(build_sections(NESTED_HTML))]
        second = [s.key for s in iter_sections(build_sections(NESTED_HTML))]
        assert first == second

    def test_inserting_heading_before_keeps_key(self):
        """A new section before C does not change C's key."""
        before = build_sections(NESTED_HTML)
        after = build_sections("<h1>New</h1>" + NESTED_HTML)
        key_c_before = find_section(before, "C").key
        key_c_after = find_section(after, "C").key
        assert key_c_before == key_c_after

    def test_key_includes_level(self):
        roots = build_sections("<h1>A</h1><h2>A</h2>")
        parent, child = roots[0], roots[0].children[0]
        assert parent.key != child.key


class TestOutlineState:
    """Tests for OutlineState."""

    def test_initially_nothing_collapsed(self):
        state = OutlineState()
        roots = build_sections(NESTED_HTML)
        assert not any(state.is_collapsed(s) for s in iter_sections(roots))

    def test_toggle_flips(self):
        state = OutlineState()
        a = build_sections(NESTED_HTML)[0]
        assert state.toggle(a) is True
        assert state.is_collapsed(a)
        assert state.toggle(a) is False
        assert not state.is_collapsed(a)

    def test_intro_is_never_collapsible(self):
        state = OutlineState()
        intro = build_sections("<p>intro</p><h1>A</h1>")[0]
        assert state.toggle(intro) is False
        assert not state.is_collapsed(intro)

    def test_collapse_independence(self):
        """Toggling C does not change A's flag."""
        state = OutlineState()
        a, c = build_sections(NESTED_HTML)
        state.toggle(a)
        state.toggle(c)
        state.toggle(c)
        assert state.is_collapsed(a)
        assert not state.is_collapsed(c)

    def test_state_survives_rebuild(self):
        state = OutlineState()
        state.toggle(build_sections(NESTED_HTML)[0])
        rebuilt = build_sections(NESTED_HTML)
        assert state.is_collapsed(rebuilt[0])


class TestRenderOutline:
    """Tests for render_outline."""

    def test_expanded_renders_everything(self):
        roots = build_sections(NESTED_HTML)
        html = str(render_outline(roots, OutlineState()))
        for text in ("<p>x</p>", "<p>y</p>", "<p>z</p>", ">A<", ">B<", ">C<"):
            assert text in html

    def test_sections_nest_in_output(self):
        roots = build_sections(NESTED_HTML)
        outline = render_outline(roots, OutlineState())
        top = outline.find_all("section", recursive=False)
        assert len(top) == 2
        assert top[0].find("section")["data-level"] == "2"

    def test_collapsed_section_omits_content_and_children(self):
        roots = build_sections(NESTED_HTML)
        state = OutlineState()
        state.toggle(roots[0])

        html = str(render_outline(roots, state))
        assert ">A<" in html  # heading and toggle still shown
        assert "<p>x</p>" not in html
        assert ">B<" not in html
        assert "<p>y</p>" not in html
        assert "<p>z</p>" in html

    def test_toggle_marks_aria_expanded(self):
        roots = build_sections(NESTED_HTML)
        state = OutlineState()
        state.toggle(roots[1])
        outline = render_outline(roots, state)
        buttons = {b.get_text(): b["aria-expanded"] for b in outline.find_all("button")}
        assert buttons == {"A": "true", "B": "true", "C": "false"}

    def test_collapsing_child_keeps_parent_content(self):
        roots = build_sections(NESTED_HTML)
        state = OutlineState()
        state.toggle(roots[0].children[0])
        html = str(render_outline(roots, state))
        assert "<p>x</p>" in html
        assert "<p>y</p>" not in html

    def test_intro_has_no_toggle(self):
        roots = build_sections("<p>intro</p><h2>A</h2><p>x</p>")
        outline = render_outline(roots, OutlineState())
        intro = outline.find("div", class_="outline-intro")
        assert intro is not None
        assert intro.find("button") is None
        assert str(intro.p) == "<p>intro</p>"

    def test_heading_tag_matches_level(self):
        roots = build_sections("<h3>T</h3><p>x</p>")
        outline = render_outline(roots, OutlineState())
        assert outline.find("h3") is not None

    def test_empty_forest(self):
        outline = render_outline([], OutlineState())
        assert outline.name == "div"
        assert list(outline.children) == []

    def test_render_does_not_mutate_sections(self):
        roots = build_sections(NESTED_HTML)
        render_outline(roots, OutlineState())
        assert roots[0].content == "<p>x</p>"


class TestFindSection:
    def test_find_nested(self):
        roots = build_sections(NESTED_HTML)
        assert find_section(roots, "B").level == 2

    def test_find_missing(self):
        assert find_section(build_sections(NESTED_HTML), "Z") is None

    def test_section_defaults(self):
        section = Section(title="T", level=1)
        assert section.content == ""
        assert section.children == []
