"""
Heuristic classification of extracted elements into semantic categories.

Checks run in a fixed precedence and the first hit wins, so an ``<a>`` with
a ``btn`` class and "next" text is navigation, never a button.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Union

from .protocols import Category, ImageElement, InteractiveElement

NAVIGATION_KEYWORDS = ("next", "prev", "previous", "chapter", "page", "continue", "back", "forward", "navigate")
BUTTON_CLASS_HINTS = ("btn", "button")
FORM_TAGS = frozenset({"input", "select", "textarea"})

Element = Union[ImageElement, InteractiveElement]


def is_navigation(element: InteractiveElement) -> bool:
    haystacks = (element.text.lower(), element.href.lower(), element.class_name.lower())
    if any(keyword in haystack for keyword in NAVIGATION_KEYWORDS for haystack in haystacks):
        return True
    return element.tag == "a" and bool(element.href)


def is_button(element: InteractiveElement) -> bool:
    return (
        element.tag == "button"
        or any(hint in element.class_name for hint in BUTTON_CLASS_HINTS)
        or bool(element.onclick)
    )


def is_form(element: InteractiveElement) -> bool:
    return element.tag in FORM_TAGS


def has_data_attributes(element: InteractiveElement) -> bool:
    return any(key.startswith("data-") for key in element.attributes)


def classify(element: Element) -> Category:
    if isinstance(element, ImageElement):
        return Category.IMAGE
    if is_navigation(element):
        return Category.NAVIGATION
    if is_button(element):
        return Category.BUTTON
    if is_form(element):
        return Category.FORM
    if has_data_attributes(element):
        return Category.DATA
    return Category.OTHER


def categorize(elements: Iterable[Element]) -> Dict[Category, List[Element]]:
    """Group elements by category, keeping input order. Every category is present."""
    groups: Dict[Category, List[Element]] = {category: [] for category in Category}
    for element in elements:
        groups[classify(element)].append(element)
    return groups


def matches_filter(element: Element, needle: str) -> bool:
    """Case-insensitive substring search over the fields a user sees."""
    needle = needle.lower()
    if not needle:
        return True
    if isinstance(element, ImageElement):
        fields = (element.url, element.format)
    else:
        fields = (element.text, element.href, element.title, element.class_name)
    return needle in " ".join(fields).lower()
