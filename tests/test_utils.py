"""Tests for utility helpers."""

from datetime import UTC, datetime, timedelta, timezone

from kanbanstore.utils import as_utc, clean_plain_text, strip_tags, to_iso


class TestStripTags:
    def test_removes_tags_and_whitespace(self):
        assert strip_tags("  <b>Fix</b> login ") == "Fix login"

    def test_plain_text_unchanged(self):
        assert strip_tags("a < b") == "a < b"

    def test_clean_plain_text_passes_non_strings(self):
        assert clean_plain_text(None) is None
        assert clean_plain_text(3) == 3


class TestDatetime:
    def test_as_utc_naive(self):
        naive = datetime(2024, 5, 1, 12, 0)
        assert as_utc(naive) == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def test_as_utc_converts_offset(self):
        plus_two = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(plus_two) == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert as_utc(plus_two).tzinfo == UTC

    def test_to_iso_renders_utc_offset(self):
        plus_two = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso(plus_two) == "2024-05-01T12:30:00+00:00"
