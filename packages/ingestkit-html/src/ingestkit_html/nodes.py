"""DOM-style view over lxml element trees.

lxml stores character data on ``element.text`` and ``child.tail`` rather
than as separate nodes.  The traversal engine works on an ordered sequence
of child *nodes* (elements and text), so this module presents that view:

- :class:`TextNode` -- a run of character data and the element owning it.
- :class:`Document` -- a document-level wrapper whose only child is the
  root element, so walking a ``Document`` visits ``<html>`` itself.
- :func:`child_nodes` / :func:`has_child_nodes` -- document-order children.

Comments and processing instructions are never yielded; their tail text is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from lxml import etree


@dataclass(frozen=True)
class TextNode:
    """A run of character data inside an element."""

    text: str
    parent: etree._Element


@dataclass(frozen=True)
class Document:
    """Document node wrapping the parsed root element."""

    root: etree._Element


Node = Union[etree._Element, TextNode]


def _is_element(node: object) -> bool:
    # lxml comments, PIs and entities carry a non-string tag
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def child_nodes(
    node: etree._Element | Document,
    skip_blank_text: bool = False,
) -> Iterator[Node]:
    """Yield the child nodes of *node* in document order.

    When *skip_blank_text* is set, whitespace-only text runs are dropped.
    """
    if isinstance(node, Document):
        yield node.root
        return

    if _keep_text(node.text, skip_blank_text):
        yield TextNode(node.text, node)
    for child in node:
        if _is_element(child):
            yield child
        if _keep_text(child.tail, skip_blank_text):
            yield TextNode(child.tail, node)


def has_child_nodes(
    node: etree._Element | Document,
    skip_blank_text: bool = False,
) -> bool:
    """Return True if :func:`child_nodes` would yield at least one node."""
    return next(child_nodes(node, skip_blank_text), None) is not None


def element_path(element: etree._Element) -> str:
    """Return a slash-separated tag path from the root to *element*."""
    tags = [
        str(ancestor.tag)
        for ancestor in reversed(list(element.iterancestors()))
    ]
    tags.append(str(element.tag))
    return "/".join(tags)


def _keep_text(text: str | None, skip_blank_text: bool) -> bool:
    if not text:
        return False
    if skip_blank_text and not text.strip():
        return False
    return True
