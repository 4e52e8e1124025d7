from __future__ import annotations

import html
from types import MappingProxyType
from typing import Any, Callable, Mapping

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, PageElement, PreformattedString

ALLOWED_TAGS = frozenset({"STRONG", "EM", "B", "I", "U", "A", "BR", "SPAN"})

ALLOWED_ATTRIBUTES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "A": frozenset({"href", "target", "rel"}),
        "SPAN": frozenset({"class"}),
    }
)

EXTERNAL_LINK_TARGET = "_blank"
EXTERNAL_LINK_REL = "noopener noreferrer"


def parse_markup(markup: str) -> BeautifulSoup:
    # Attribute values stay plain strings ("rel", "class" are not split).
    return BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)


def serialize_markup(tree: BeautifulSoup) -> str:
    return tree.decode(formatter="minimal")


def escape_text(text: Any) -> str:
    """Return *text* with every markup-significant character encoded."""
    if text is None:
        return ""
    return html.escape(str(text), quote=True)


def _is_text(node: PageElement) -> bool:
    if not isinstance(node, NavigableString):
        return False
    # Comments, doctypes and processing instructions are not text; CDATA is.
    return not isinstance(node, PreformattedString) or isinstance(node, CData)


def text_content(node: PageElement) -> str:
    """Concatenated text of *node* and its descendants, in document order."""
    if isinstance(node, NavigableString):
        return str(node) if _is_text(node) else ""
    return "".join(str(item) for item in node.descendants if _is_text(item))


def _filter_attributes(tag: Tag, allowed: frozenset[str]) -> None:
    for name in list(tag.attrs):
        if name not in allowed:
            del tag.attrs[name]


def _harden_anchor(tag: Tag) -> None:
    href = tag.attrs.get("href")
    if href is None:
        return
    if href.strip().lower().startswith("javascript:"):
        del tag.attrs["href"]
    elif href.startswith("http"):
        # Raw, case-sensitive prefix test: "Http://" and " http://" are left as is.
        tag.attrs["target"] = EXTERNAL_LINK_TARGET
        tag.attrs["rel"] = EXTERNAL_LINK_REL


def _clean_children(
    parent: Tag,
    allowed_tags: frozenset[str] | set[str],
    allowed_attributes: Mapping[str, frozenset[str] | set[str]],
) -> list[Tag]:
    """Rebuild the child list of *parent* and return the kept elements."""
    cleaned: list[PageElement] = []
    kept: list[Tag] = []
    changed = False
    for child in list(parent.contents):
        if isinstance(child, Tag):
            tag_name = child.name.upper()
            if tag_name not in allowed_tags:
                text = text_content(child)
                if text:
                    cleaned.append(NavigableString(text))
                changed = True
                continue
            _filter_attributes(child, frozenset(allowed_attributes.get(tag_name, ())))
            if tag_name == "A":
                _harden_anchor(child)
            cleaned.append(child)
            kept.append(child)
        elif isinstance(child, CData):
            cleaned.append(NavigableString(str(child)))
            changed = True
        elif _is_text(child):
            cleaned.append(child)
        else:
            changed = True
    if changed:
        parent.clear()
        for node in cleaned:
            parent.append(node)
    return kept


def _clean_tree(
    root: Tag,
    allowed_tags: frozenset[str] | set[str],
    allowed_attributes: Mapping[str, frozenset[str] | set[str]],
) -> None:
    # Explicit stack: nesting depth is bounded by the input, not the interpreter.
    stack = [root]
    while stack:
        parent = stack.pop()
        stack.extend(_clean_children(parent, allowed_tags, allowed_attributes))


def sanitize(
    markup: Any,
    *,
    allowed_tags: frozenset[str] | set[str] = ALLOWED_TAGS,
    allowed_attributes: Mapping[str, frozenset[str] | set[str]] = ALLOWED_ATTRIBUTES,
    parse: Callable[[str], Tag] = parse_markup,
    serialize: Callable[[Tag], str] = serialize_markup,
) -> str:
    """Strip *markup* down to the allowed formatting tags.

    Disallowed elements collapse to their text content, attributes outside the
    per-tag allow-list are dropped and anchors are hardened: ``javascript:``
    hrefs are removed, links starting with ``http`` open in a new tab with
    ``rel="noopener noreferrer"``. Tag names in *allowed_tags* and the keys of
    *allowed_attributes* are upper case. Never raises for any input.
    """
    if markup is None:
        return ""
    markup = str(markup)
    if not markup:
        return ""
    tree = parse(markup)
    _clean_tree(tree, allowed_tags, allowed_attributes)
    return serialize(tree)
