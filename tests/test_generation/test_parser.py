"""Tests for GenerationResponseParser."""

from datetime import datetime, timezone

import pytest

from src.generation.parser import FALLBACK_TITLE, GenerationResponseParser, extract_title


@pytest.fixture
def parser() -> GenerationResponseParser:
    return GenerationResponseParser()


class TestExtractTitle:
    def test_first_heading_wins(self):
        assert extract_title("intro\n# First\n# Second") == "First"

    def test_subheadings_ignored(self):
        assert extract_title("## Not a title\n### Nor this") is None

    def test_heading_must_start_line(self):
        assert extract_title("   # indented") is None

    def test_empty_heading_ignored(self):
        assert extract_title("#  \nbody") is None

    def test_only_newline_separates_lines(self):
        assert extract_title("# Part one\u2028part two\nbody") == "Part one\u2028part two"

    def test_crlf_line_endings(self):
        assert extract_title("# Windows title\r\nbody") == "Windows title"


class TestParse:
    def test_heading_becomes_title(self, parser):
        draft = parser.parse("# Hello\nBody text")

        assert draft.title == "Hello"
        assert draft.content == "# Hello\nBody text"

    def test_fallback_title(self, parser):
        draft = parser.parse("no heading here")

        assert draft.title == FALLBACK_TITLE
        assert draft.content == "no heading here"

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_input_is_total(self, parser, raw):
        draft = parser.parse(raw)

        assert draft.title == FALLBACK_TITLE
        assert draft.content == ""

    def test_created_at_is_parse_time(self, parser):
        before = datetime.now(timezone.utc)
        draft = parser.parse("# Written 1999-01-01\nbody")
        after = datetime.now(timezone.utc)

        assert before <= draft.created_at <= after

    def test_custom_fallback(self):
        draft = GenerationResponseParser(fallback_title="Untitled").parse("plain")
        assert draft.title == "Untitled"
