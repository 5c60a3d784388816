"""
Unit tests for interactive detection and identity-key dedup.
"""

import pytest
from starmark.extractor.interactive import extract_interactive, identity_key, is_interactive
from starmark.protocols import RawNode

from tests.helpers import node


class TestIsInteractive:
    """Each hint on its own is enough."""

    @pytest.mark.parametrize("tag", ["button", "a", "input", "select", "textarea"])
    def test_interactive_tags(self, tag):
        assert is_interactive(node(tag))

    @pytest.mark.parametrize(
        "attribute",
        [
            "onclick",
            "onmousedown",
            "onmouseup",
            "onchange",
            "href",
            "data-action",
            "data-toggle",
            "data-target",
            "data-server",
            "data-chapter",
            "data-url",
        ],
    )
    def test_interactive_attributes(self, attribute):
        raw = RawNode(tag="div", attributes={attribute: ""})
        assert is_interactive(raw)

    @pytest.mark.parametrize("role, expected", [("button", True), ("link", True), ("banner", False)])
    def test_roles(self, role, expected):
        assert is_interactive(node("span", role=role)) is expected

    def test_tabindex(self):
        assert is_interactive(node("div", tabindex="-1"))

    @pytest.mark.parametrize("class_name", ["nav-btn", "big-button", "clickable", "xbtnx"])
    def test_class_hints(self, class_name):
        assert is_interactive(node("div", class_=class_name))

    def test_pointer_cursor_inline_or_computed(self):
        assert is_interactive(RawNode(tag="div", inline_cursor="pointer"))
        assert is_interactive(RawNode(tag="div", computed_cursor="pointer"))

    def test_plain_nodes_are_not_interactive(self):
        assert not is_interactive(node("div", "hello", class_="content"))
        assert not is_interactive(RawNode(tag="p", computed_cursor="auto"))

    def test_unrelated_data_attribute_is_not_a_hint(self):
        assert not is_interactive(node("div", data_id="5"))


class TestIdentityKey:
    def test_uses_first_thirty_chars_of_trimmed_text(self):
        a = node("a", "   " + "x" * 30 + "tail one", href="/1")
        b = node("a", "x" * 30 + "tail two   ", href="/1")

        assert identity_key(a) == identity_key(b)

    def test_differs_on_href(self):
        assert identity_key(node("a", "Next", href="/2")) != identity_key(node("a", "Next", href="/3"))


class TestExtractInteractive:
    def test_first_occurrence_wins(self):
        first = node("a", "Next", href="/2", class_="btn", title="first")
        duplicate = node("a", "Next", href="/2", class_="btn", title="second")

        result = extract_interactive([first, duplicate])

        assert len(result) == 1
        assert result[0].title == "first"

    def test_fields_and_attributes_captured(self):
        raw = node(
            "input",
            id="q",
            class_="search-box",
            name="query",
            placeholder="Search...",
            value="abc",
            data_toggle="dropdown",
        )

        (element,) = extract_interactive([raw])

        assert element.type == "INTERACTIVE"
        assert element.tag == "input"
        assert element.id == "q"
        assert element.class_name == "search-box"
        assert element.name == "query"
        assert element.placeholder == "Search..."
        assert element.value == "abc"
        assert element.attributes == {
            "id": "q",
            "class": "search-box",
            "name": "query",
            "placeholder": "Search...",
            "value": "abc",
            "data-toggle": "dropdown",
        }

    def test_text_trimmed_and_truncated(self):
        (element,) = extract_interactive([node("button", "  " + "y" * 150 + "  ")])
        assert element.text == "y" * 100

    def test_non_interactive_nodes_dropped_and_order_kept(self):
        nodes = [node("div", "x"), node("button", "B"), node("p"), node("a", "A", href="/a")]

        result = extract_interactive(nodes)

        assert [e.tag for e in result] == ["button", "a"]

    def test_idempotent_on_identical_input(self):
        nodes = [
            node("a", "Next", href="/2", class_="btn next"),
            node("a", "Next", href="/2", class_="btn next"),
            node("button", "Go", onclick="go()"),
            node("div", "Menu", role="button"),
        ]

        first = extract_interactive(nodes)
        second = extract_interactive(nodes)

        assert first == second
        assert len(first) == 3
