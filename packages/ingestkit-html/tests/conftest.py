"""Shared test fixtures for ingestkit-html tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ingestkit_html.config import HTMLProcessorConfig


class RecordingSink:
    """CellSink that records every commit as ``(column, row, content)``."""

    def __init__(self) -> None:
        self.commits: list[tuple[str, int, str]] = []

    def commit(self, column: str, row: int, content: str) -> None:
        self.commits.append((column, row, content))

    @property
    def cells(self) -> dict[str, str]:
        return {f"{column}{row}": content for column, row, content in self.commits}


@pytest.fixture
def default_config() -> HTMLProcessorConfig:
    """Return a default HTMLProcessorConfig."""
    return HTMLProcessorConfig()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def tmp_html_file(tmp_path: Path):
    """Factory fixture to write an HTML string to a temp file and return the path."""

    def _write(html_content: str, filename: str = "test.html") -> str:
        file_path = tmp_path / filename
        file_path.write_text(html_content, encoding="utf-8")
        return str(file_path)

    return _write


@pytest.fixture
def sample_html_table() -> str:
    """Single two-cell table."""
    return "<table><tr><td>A1</td><td>B1</td></tr></table>"


@pytest.fixture
def sample_html_document() -> str:
    """Full document with a heading, paragraph, and a header row table."""
    return """<!DOCTYPE html>
<html>
  <head>
    <title>Quarterly report</title>
    <style>td { color: red; }</style>
  </head>
  <body>
    <h1>Sales</h1>
    <p>Figures in   thousands.</p>
    <table>
      <tr><th>Region</th><th>Q1</th><th>Q2</th></tr>
      <tr><td>North</td><td>10</td><td>12</td></tr>
      <tr><td>South</td><td colspan="2">n/a</td></tr>
    </table>
    <script>var ignored = 1;</script>
  </body>
</html>"""
