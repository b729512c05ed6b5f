"""Unit tests for ingestkit_html.reader -- the load orchestrator."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from openpyxl import Workbook

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import (
    ErrorCode,
    FormatError,
    ParseError,
    SecurityError,
    SinkWriteError,
)
from ingestkit_html.handlers import Continuation, HandlerRegistry
from ingestkit_html.reader import HTMLReader
from ingestkit_html.tables import HTMLTableConsumer


class StubConsumer:
    """Consumer with caller-supplied handlers that writes to a given sink."""

    def __init__(self, registry: HandlerRegistry, sink) -> None:
        self._registry = registry
        self.sink = sink
        self.prepared: list[Workbook] = []

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    def prepare(self, workbook: Workbook):
        self.prepared.append(workbook)
        return self.sink


@pytest.fixture
def reader() -> HTMLReader:
    return HTMLReader(HTMLTableConsumer())


class TestLoad:
    """Tests for HTMLReader.load."""

    def test_end_to_end_table(self, reader, tmp_html_file, sample_html_table):
        workbook = reader.load(tmp_html_file(sample_html_table))
        sheet = workbook.active
        assert sheet["A1"].value == "A1"
        assert sheet["B1"].value == "B1"

    def test_deeply_nested_text_loaded(self, reader, tmp_html_file):
        html = "<body>" + "<div>" * 600 + "x" + "</div>" * 600 + "</body>"
        workbook = reader.load(tmp_html_file(html))
        assert workbook.active["A1"].value == "x"

    def test_returns_new_workbook_each_time(self, reader, tmp_html_file, sample_html_table):
        fp = tmp_html_file(sample_html_table)
        assert reader.load(fp) is not reader.load(fp)

    def test_initial_position_from_config(self, tmp_html_file, sample_html_table):
        config = HTMLProcessorConfig(first_row=5, first_column="C")
        workbook = HTMLReader(HTMLTableConsumer(), config).load(
            tmp_html_file(sample_html_table)
        )
        assert workbook.active["C5"].value == "A1"
        assert workbook.active["D5"].value == "B1"
        assert workbook.active["A1"].value is None

    def test_fresh_state_per_load(self, recording_sink, tmp_html_file):
        def _tr(element, state):
            state.append("row")
            state.flush()
            state.advance_row()
            return Continuation.STOP

        consumer = StubConsumer(HandlerRegistry({"tr": _tr}), recording_sink)
        reader = HTMLReader(consumer)
        fp = tmp_html_file("<table><tr><td>x</td></tr></table>")
        reader.load(fp)
        reader.load(fp)
        assert recording_sink.commits == [("A", 1, "row"), ("A", 1, "row")]

    def test_prepare_called_before_traversal(self, recording_sink, tmp_html_file):
        order: list[str] = []

        def _text(node, state):
            order.append("text")

        consumer = StubConsumer(HandlerRegistry(text=_text), recording_sink)
        original_prepare = consumer.prepare

        def _prepare(workbook):
            order.append("prepare")
            return original_prepare(workbook)

        consumer.prepare = _prepare
        HTMLReader(consumer).load(tmp_html_file("<p>hello</p>"))
        assert order == ["prepare", "text"]


class TestLoadIntoExisting:
    """Tests for HTMLReader.load_into_existing."""

    def test_uses_given_workbook(self, reader, tmp_html_file, sample_html_table):
        workbook = Workbook()
        workbook.active["Z9"] = "kept"
        result = reader.load_into_existing(tmp_html_file(sample_html_table), workbook)
        assert result is workbook
        assert workbook.active["Z9"].value == "kept"
        assert workbook.active["A1"].value == "A1"


class TestLoadErrors:
    """Errors abort the load and propagate."""

    def test_format_error_for_plain_text(self, reader, tmp_html_file):
        fp = tmp_html_file("no markup here at all")
        with pytest.raises(FormatError) as exc_info:
            reader.load(fp)
        assert exc_info.value.code == ErrorCode.E_FORMAT_INVALID
        assert "invalid HTML file" in exc_info.value.message

    def test_format_error_skips_consumer(self, recording_sink, tmp_html_file):
        consumer = StubConsumer(HandlerRegistry(), recording_sink)
        with pytest.raises(FormatError):
            HTMLReader(consumer).load(tmp_html_file("plain"))
        assert consumer.prepared == []

    def test_sniff_only_reads_configured_prefix(self, tmp_html_file):
        config = HTMLProcessorConfig(sniff_bytes=16)
        reader = HTMLReader(HTMLTableConsumer(), config)
        fp = tmp_html_file("x" * 64 + "<p>late markup</p>")
        with pytest.raises(FormatError):
            reader.load(fp)

    def test_entity_declaration_rejected(self, reader, tmp_html_file):
        fp = tmp_html_file('<!DOCTYPE html [<!ENTITY x "y">]><p>&x;</p>')
        with pytest.raises(SecurityError):
            reader.load(fp)

    def test_parse_error_propagates(self, reader, tmp_html_file):
        fp = tmp_html_file("<p>x</p>")
        with patch(
            "ingestkit_html.reader.parse_html",
            side_effect=ParseError("broken"),
        ):
            with pytest.raises(ParseError):
                reader.load(fp)

    def test_sink_error_propagates(self, tmp_html_file):
        sink = MagicMock()
        sink.commit.side_effect = SinkWriteError("rejected", cell="A1")
        consumer = StubConsumer(HTMLTableConsumer().registry, sink)
        with pytest.raises(SinkWriteError):
            HTMLReader(consumer).load(tmp_html_file("<table><tr><td>x</td></tr></table>"))

    def test_missing_file(self, reader, tmp_path):
        with pytest.raises(OSError):
            reader.load(str(tmp_path / "missing.html"))


class TestCanRead:
    """Tests for HTMLReader.can_read."""

    def test_html_file(self, reader, tmp_html_file):
        assert reader.can_read(tmp_html_file("<html></html>")) is True

    def test_plain_text(self, reader, tmp_html_file):
        assert reader.can_read(tmp_html_file("hello")) is False

    def test_missing_file(self, reader, tmp_path):
        assert reader.can_read(str(tmp_path / "missing.html")) is False
