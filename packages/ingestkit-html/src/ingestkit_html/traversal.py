"""Traversal engine -- walks a document and dispatches nodes to handlers.

For each child of the node being walked, in document order:

1. Text nodes go to the registry's text handler and are never recursed.
2. Elements are dispatched by normalized tag name (falling back to the
   default handler).  If the handler returns
   :attr:`Continuation.TRAVERSE_CHILDREN` and the element has child nodes,
   the element's children are walked before its next sibling.

Anything else (``STOP``, ``None``, even the plain string value of
``TRAVERSE_CHILDREN``) leaves the subtree alone: handlers that
already consumed their children via :meth:`TraversalState.descend` must
not have them walked a second time.

The walk keeps an explicit stack of child iterators instead of recursing,
so document depth is bounded by ``max_depth`` rather than by the
interpreter's recursion limit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from ingestkit_html.errors import ErrorCode, HTMLIngestException
from ingestkit_html.handlers import Continuation, HandlerRegistry
from ingestkit_html.nodes import (
    Document,
    Node,
    TextNode,
    child_nodes,
    element_path,
    has_child_nodes,
)
from ingestkit_html.tags import normalize_tag_name

if TYPE_CHECKING:
    from lxml import etree

    from ingestkit_html.state import TraversalState


class TraversalEngine:
    """Depth-first, document-order walker over an lxml tree.

    Parameters
    ----------
    registry:
        Handlers to dispatch to.  Read-only; one registry may be shared by
        any number of engines and concurrent loads.
    skip_blank_text:
        Drop whitespace-only text nodes instead of passing them to the
        text handler.
    max_depth:
        Maximum element nesting depth, counted from the node passed to the
        outermost :meth:`traverse` call.  ``None`` disables the check.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        skip_blank_text: bool = True,
        max_depth: int | None = None,
    ) -> None:
        self.registry = registry
        self.skip_blank_text = skip_blank_text
        self.max_depth = max_depth

    def traverse(self, node: etree._Element | Document, state: TraversalState) -> None:
        """Walk the children of *node*, mutating *state* through handlers."""
        if state._engine is None:
            state.bind(self)

        base_depth = state.depth
        stack: list[Iterator[Node]] = [self._children(node)]
        try:
            while stack:
                state.depth = base_depth + len(stack)
                child = next(stack[-1], None)
                if child is None:
                    stack.pop()
                    continue

                if isinstance(child, TextNode):
                    self.registry.text(child, state)
                    continue

                self._check_depth(child, state.depth)
                handler = self.registry.resolve(normalize_tag_name(child.tag))
                signal = handler(child, state)
                if signal is Continuation.TRAVERSE_CHILDREN and has_child_nodes(
                    child, self.skip_blank_text
                ):
                    stack.append(self._children(child))
        finally:
            state.depth = base_depth

    def _children(self, node: etree._Element | Document) -> Iterator[Node]:
        return child_nodes(node, self.skip_blank_text)

    def _check_depth(self, element: etree._Element, depth: int) -> None:
        if self.max_depth is not None and depth > self.max_depth:
            raise HTMLIngestException(
                f"HTML nesting depth exceeds limit of {self.max_depth}",
                code=ErrorCode.E_SECURITY_DEPTH_BOMB,
                stage="traverse",
                element_path=element_path(element),
            )
