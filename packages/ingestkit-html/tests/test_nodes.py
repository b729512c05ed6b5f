"""Unit tests for ingestkit_html.nodes -- DOM-style child view over lxml."""

from __future__ import annotations

from lxml import etree
from lxml import html as lxml_html

from ingestkit_html.nodes import (
    Document,
    TextNode,
    child_nodes,
    element_path,
    has_child_nodes,
)


def _describe(nodes):
    return [
        ("text", n.text) if isinstance(n, TextNode) else ("element", n.tag)
        for n in nodes
    ]


class TestChildNodes:
    """Tests for child_nodes ordering and filtering."""

    def test_text_and_tails_in_document_order(self):
        root = etree.fromstring("<p>one<b>two</b>three<i/>four</p>")
        assert _describe(child_nodes(root)) == [
            ("text", "one"),
            ("element", "b"),
            ("text", "three"),
            ("element", "i"),
            ("text", "four"),
        ]

    def test_text_node_parent_is_owning_element(self):
        root = etree.fromstring("<p>one<b>two</b>three</p>")
        nodes = list(child_nodes(root))
        assert nodes[0].parent is root
        # tail text belongs to the parent, not the preceding sibling
        assert nodes[2].parent is root

    def test_comments_skipped_but_tail_kept(self):
        root = etree.fromstring("<p>a<!-- note -->b</p>")
        assert _describe(child_nodes(root)) == [("text", "a"), ("text", "b")]

    def test_processing_instruction_skipped(self):
        root = etree.fromstring("<p><?php echo 1; ?>x</p>")
        assert _describe(child_nodes(root)) == [("text", "x")]

    def test_blank_text_kept_by_default(self):
        root = etree.fromstring("<tr> <td>x</td> </tr>")
        assert _describe(child_nodes(root)) == [
            ("text", " "),
            ("element", "td"),
            ("text", " "),
        ]

    def test_blank_text_skipped(self):
        root = etree.fromstring("<tr> <td>x</td> </tr>")
        assert _describe(child_nodes(root, skip_blank_text=True)) == [
            ("element", "td"),
        ]

    def test_document_yields_root(self):
        root = lxml_html.document_fromstring("<p>x</p>")
        assert list(child_nodes(Document(root))) == [root]


class TestHasChildNodes:
    """Tests for has_child_nodes."""

    def test_empty_element(self):
        assert has_child_nodes(etree.fromstring("<br/>")) is False

    def test_text_only(self):
        assert has_child_nodes(etree.fromstring("<td>x</td>")) is True

    def test_blank_text_only(self):
        element = etree.fromstring("<td>  </td>")
        assert has_child_nodes(element) is True
        assert has_child_nodes(element, skip_blank_text=True) is False

    def test_comment_only(self):
        assert has_child_nodes(etree.fromstring("<td><!-- c --></td>")) is False

    def test_document(self):
        assert has_child_nodes(Document(etree.fromstring("<html/>"))) is True


class TestElementPath:
    """Tests for element_path."""

    def test_nested_path(self):
        root = etree.fromstring("<html><body><table><tr/></table></body></html>")
        tr = root.find(".//tr")
        assert element_path(tr) == "html/body/table/tr"

    def test_root_path(self):
        assert element_path(etree.fromstring("<html/>")) == "html"
