"""Continuation signal, handler types, and the handler registry.

A handler receives one node plus the shared :class:`TraversalState` and
tells the engine whether to walk that node's children.  Recursion is
opt-in: an element handler that returns ``None`` is treated as having
returned :attr:`Continuation.STOP`.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterator, Mapping, Optional

from ingestkit_html.tags import normalize_tag_name

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from ingestkit_html.nodes import TextNode
    from ingestkit_html.state import TraversalState


class Continuation(str, Enum):
    """What the engine does after an element handler returns."""

    STOP = "stop"
    TRAVERSE_CHILDREN = "traverse_children"


ElementHandler = Callable[["HtmlElement", "TraversalState"], Optional[Continuation]]
TextHandler = Callable[["TextNode", "TraversalState"], None]


def traverse_children(element: HtmlElement, state: TraversalState) -> Continuation:
    """Element handler that does nothing but request recursion."""
    return Continuation.TRAVERSE_CHILDREN


def skip_element(element: HtmlElement, state: TraversalState) -> Continuation:
    """Element handler that ignores the element and its subtree."""
    return Continuation.STOP


class HandlerRegistry:
    """Immutable mapping from canonical tag name to element handler.

    Parameters
    ----------
    handlers:
        Raw tag name -> handler.  Names are normalized on registration;
        two names that normalize to the same key raise ``ValueError``.
    default:
        Handler for elements with no registered name.
    text:
        Handler for text nodes.
    """

    def __init__(
        self,
        handlers: Mapping[str, ElementHandler] | None = None,
        default: ElementHandler = traverse_children,
        text: TextHandler | None = None,
    ) -> None:
        table: dict[str, ElementHandler] = {}
        for raw_name, handler in (handlers or {}).items():
            key = normalize_tag_name(raw_name)
            if not key:
                raise ValueError(f"Tag name {raw_name!r} normalizes to an empty key")
            if key in table:
                raise ValueError(
                    f"Tag name {raw_name!r} collides with an existing handler for {key!r}"
                )
            table[key] = handler
        self._handlers = MappingProxyType(table)
        self._default = default
        self._text = text or _ignore_text

    @property
    def default(self) -> ElementHandler:
        return self._default

    @property
    def text(self) -> TextHandler:
        return self._text

    def resolve(self, canonical_name: str) -> ElementHandler:
        """Return the handler for *canonical_name*, or the default handler."""
        return self._handlers.get(canonical_name, self._default)

    def resolve_tag(self, raw_name: str) -> ElementHandler:
        """Normalize *raw_name* and resolve it."""
        return self.resolve(normalize_tag_name(raw_name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_tag_name(name) in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry({sorted(self._handlers)!r})"


def _ignore_text(node: TextNode, state: TraversalState) -> None:
    return None
