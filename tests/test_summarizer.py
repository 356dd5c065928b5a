"""Tests for notes_api.summarizer."""

import pytest

from notes_api.errors import SummarizationError
from notes_api.summarizer import (
    ELLIPSIS,
    SUMMARY_LENGTH,
    content_from_payload,
    summarize,
)


class TestSummarize:
    def test_short_content_still_gets_marker(self) -> None:
        assert summarize("Buy milk and eggs") == "Buy milk and eggs..."

    def test_empty_content(self) -> None:
        assert summarize("") == ELLIPSIS

    def test_long_content_truncated(self) -> None:
        content = "x" * 250
        summary = summarize(content)
        assert summary == "x" * SUMMARY_LENGTH + ELLIPSIS
        assert len(summary) == 103

    def test_exactly_limit(self) -> None:
        content = "y" * SUMMARY_LENGTH
        assert summarize(content) == content + ELLIPSIS

    @pytest.mark.parametrize("length", [0, 1, 99, 100, 101, 1000])
    def test_bounded_length_and_marker(self, length: int) -> None:
        summary = summarize("a" * length)
        assert summary.endswith(ELLIPSIS)
        assert len(summary) <= SUMMARY_LENGTH + len(ELLIPSIS)

    def test_deterministic(self) -> None:
        content = "The same text every time.\nWith a second line."
        assert summarize(content) == summarize(content)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(SummarizationError):
            summarize(None)  # type: ignore[arg-type]


class TestContentFromPayload:
    def test_valid_payload(self) -> None:
        assert content_from_payload({"content": "hello"}) == "hello"

    def test_empty_content_is_valid(self) -> None:
        assert content_from_payload({"content": ""}) == ""

    @pytest.mark.parametrize(
        "payload",
        [None, [], "content", {}, {"text": "hi"}, {"content": 42}, {"content": None}],
    )
    def test_malformed_payload(self, payload) -> None:
        with pytest.raises(SummarizationError):
            content_from_payload(payload)
