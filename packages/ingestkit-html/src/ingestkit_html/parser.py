"""Build an lxml document tree from sanitized HTML bytes."""

from __future__ import annotations

from lxml import etree
from lxml import html as lxml_html

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import ErrorCode, ParseError


def build_parser(config: HTMLProcessorConfig) -> lxml_html.HTMLParser:
    """Return an HTML parser configured from *config*.

    Network access is always disabled; blank text and comments are removed
    according to the config.  ``huge_tree`` lifts libxml2's silent 256-level
    nesting cap so deep markup reaches the traversal's ``max_depth`` guard
    instead of being truncated.
    """
    return lxml_html.HTMLParser(
        encoding=config.encoding,
        remove_blank_text=config.skip_blank_text,
        remove_comments=config.remove_comments,
        remove_pis=True,
        no_network=True,
        huge_tree=True,
    )


def parse_html(raw: bytes, config: HTMLProcessorConfig) -> lxml_html.HtmlElement:
    """Parse *raw* into a document and return its root (``<html>``) element.

    Raises
    ------
    ParseError
        ``E_PARSE_EMPTY`` when the input holds no content, otherwise
        ``E_PARSE_CORRUPT``.
    """
    if not raw.strip():
        raise ParseError("Document is empty", code=ErrorCode.E_PARSE_EMPTY)

    try:
        root = lxml_html.document_fromstring(raw, parser=build_parser(config))
    except etree.ParserError as exc:
        code = ErrorCode.E_PARSE_EMPTY if "empty" in str(exc).lower() else ErrorCode.E_PARSE_CORRUPT
        raise ParseError(f"Failed to load HTML as a document: {exc}", code=code) from exc
    except (etree.XMLSyntaxError, ValueError, LookupError) as exc:
        raise ParseError(f"Failed to load HTML as a document: {exc}") from exc

    return root
