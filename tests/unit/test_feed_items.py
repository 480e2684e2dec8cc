"""Unit tests for feed row helpers in pokefeed.feed.items."""

import pytest

from conftest import make_entity
from pokefeed.feed.items import (
    ERROR_MARKER,
    LOADING_MARKER,
    ItemKind,
    append_page,
    data_row,
    entities_of,
    has_data_rows,
    trailing_marker,
    with_marker,
)


class TestFeedItems:

    def test_append_page_drops_trailing_marker(self):
        items = [data_row(make_entity("1")), LOADING_MARKER]

        merged = append_page(items, [make_entity("2"), make_entity("3")])

        assert [i.kind for i in merged] == [ItemKind.DATA] * 3
        assert [e.id for e in entities_of(merged)] == ["1", "2", "3"]

    def test_with_marker_replaces_existing_marker(self):
        items = [data_row(make_entity("1")), LOADING_MARKER]

        marked = with_marker(items, ERROR_MARKER)

        assert marked == [data_row(make_entity("1")), ERROR_MARKER]

    def test_with_marker_rejects_data_row(self):
        with pytest.raises(ValueError):
            with_marker([], data_row(make_entity("1")))

    def test_trailing_marker(self):
        assert trailing_marker([]) is None
        assert trailing_marker([data_row(make_entity("1"))]) is None
        assert trailing_marker([data_row(make_entity("1")), ERROR_MARKER]) is ERROR_MARKER

    def test_has_data_rows_ignores_markers(self):
        assert has_data_rows([LOADING_MARKER]) is False
        assert has_data_rows([data_row(make_entity("1")), ERROR_MARKER]) is True
