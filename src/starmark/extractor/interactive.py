"""
Interactive pass: decide which raw nodes are interactive and deduplicate them.

A node is interactive when any single hint fires. Deduplication is a stable,
document-order pass keyed on a composite identity; the first node with a
given key wins and later ones are dropped without merging.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from ..protocols import InteractiveElement, RawNode

INTERACTIVE_TAGS = frozenset({"button", "a", "input", "select", "textarea"})

INTERACTIVE_ATTRIBUTES = (
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
)

CLICKABLE_ROLES = frozenset({"button", "link"})

CLASS_HINTS = ("btn", "button", "click")

IDENTITY_TEXT_LENGTH = 30
TEXT_LENGTH = 100

IdentityKey = Tuple[str, str, str, str, str]


def is_interactive(node: RawNode) -> bool:
    if node.tag in INTERACTIVE_TAGS:
        return True
    if any(node.has_attribute(attr) for attr in INTERACTIVE_ATTRIBUTES):
        return True
    if node.get_attribute("role") in CLICKABLE_ROLES:
        return True
    if node.has_attribute("tabindex"):
        return True
    if any(hint in node.class_name for hint in CLASS_HINTS):
        return True
    return node.inline_cursor == "pointer" or node.computed_cursor == "pointer"


def identity_key(node: RawNode) -> IdentityKey:
    return (
        node.tag,
        node.id or "",
        node.class_name or "",
        node.get_attribute("href"),
        (node.text or "").strip()[:IDENTITY_TEXT_LENGTH],
    )


def to_element(node: RawNode) -> InteractiveElement:
    return InteractiveElement(
        tag=node.tag,
        text=(node.text or "").strip()[:TEXT_LENGTH],
        id=node.id or "",
        class_name=node.class_name or "",
        title=node.get_attribute("title"),
        href=node.get_attribute("href"),
        onclick=node.get_attribute("onclick"),
        value=node.value or "",
        name=node.name or "",
        placeholder=node.placeholder or "",
        attributes=dict(node.attributes),
    )


def extract_interactive(nodes: Iterable[RawNode]) -> List[InteractiveElement]:
    seen: set[IdentityKey] = set()
    results: List[InteractiveElement] = []

    for node in nodes:
        if not is_interactive(node):
            continue
        key = identity_key(node)
        if key in seen:
            continue
        seen.add(key)
        results.append(to_element(node))

    return results
