"""Unit tests for ingestkit_html.parser -- lxml document building."""

from __future__ import annotations

import pytest

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import ErrorCode, ParseError
from ingestkit_html.nodes import child_nodes
from ingestkit_html.parser import parse_html


class TestParseHtml:
    """Tests for parse_html."""

    def test_returns_html_root(self, default_config):
        root = parse_html(b"<html><body><p>x</p></body></html>", default_config)
        assert root.tag == "html"
        assert root.find("body/p").text == "x"

    def test_fragment_wrapped_in_document(self, default_config):
        root = parse_html(b"<table><tr><td>A1</td></tr></table>", default_config)
        assert root.tag == "html"
        assert root.find(".//td").text == "A1"

    def test_tags_lowercased(self, default_config):
        root = parse_html(b"<TABLE><TR><TD>x</TD></TR></TABLE>", default_config)
        assert root.find(".//td") is not None

    def test_comments_removed_by_default(self, default_config):
        root = parse_html(b"<p>a<!-- hidden -->b</p>", default_config)
        p = root.find(".//p")
        assert "".join(n.text for n in child_nodes(p)) == "ab"
        assert len(p) == 0

    def test_comments_kept_when_configured(self):
        config = HTMLProcessorConfig(remove_comments=False)
        root = parse_html(b"<p>a<!-- hidden -->b</p>", config)
        assert len(root.find(".//p")) == 1

    def test_deep_nesting_kept(self, default_config):
        raw = b"<body>" + b"<div>" * 600 + b"x" + b"</div>" * 600 + b"</body>"
        root = parse_html(raw, default_config)
        assert len(root.findall(".//div")) == 600
        assert root.findall(".//div")[-1].text == "x"

    def test_explicit_encoding(self):
        config = HTMLProcessorConfig(encoding="iso-8859-1")
        root = parse_html("<p>café</p>".encode("iso-8859-1"), config)
        assert root.find(".//p").text == "café"


class TestParseErrors:
    """Tests for ParseError mapping."""

    @pytest.mark.parametrize("raw", [b"", b"   \n  "])
    def test_empty_input(self, default_config, raw):
        with pytest.raises(ParseError) as exc_info:
            parse_html(raw, default_config)
        assert exc_info.value.code == ErrorCode.E_PARSE_EMPTY
        assert exc_info.value.stage == "parse"

    def test_unknown_encoding(self):
        config = HTMLProcessorConfig(encoding="no-such-codec")
        with pytest.raises(ParseError) as exc_info:
            parse_html(b"<p>x</p>", config)
        assert exc_info.value.code == ErrorCode.E_PARSE_CORRUPT
