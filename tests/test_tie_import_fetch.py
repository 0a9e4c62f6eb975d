from __future__ import annotations

import pytest

from core import http_client
from parsing.errors import TableNotFound
from services import tie_import
from tests.factories import STANDINGS_TABLE, fixture_row, results_page


def test_fetch_builds_fresh_batch():
    page = results_page([fixture_row("22.11.2025 10:00"), fixture_row("kaputt")])
    calls = []

    def fetcher(url):
        calls.append(url)
        return page

    batch = tie_import.fetch_import_batch("https://example.org/plan", fetcher=fetcher)
    assert calls == ["https://example.org/plan"]
    assert batch.source_url == "https://example.org/plan"
    assert len(batch) == 1
    assert batch.skipped_rows == 1


def test_new_fetch_does_not_merge_with_previous_batch():
    first = tie_import.fetch_import_batch(
        "https://example.org/a",
        fetcher=lambda u: results_page([fixture_row("22.11.2025 10:00")] * 3),
    )
    first.set_all(False)
    second = tie_import.fetch_import_batch(
        "https://example.org/b",
        fetcher=lambda u: results_page([fixture_row("29.11.2025 10:00")]),
    )
    assert len(second) == 1
    assert all(c.selected for c in second)


def test_invalid_url_blocks_fetch():
    def fetcher(url):  # pragma: no cover - must not be reached
        raise AssertionError("fetch should not start")

    with pytest.raises(http_client.InvalidInput):
        tie_import.fetch_import_batch("ftp://example.org", fetcher=fetcher)


def test_fetch_phase_errors_propagate():
    def fetcher(url):
        raise http_client.UpstreamError(500, "Internal Server Error", url)

    with pytest.raises(http_client.UpstreamError):
        tie_import.fetch_import_batch("https://example.org", fetcher=fetcher)
    with pytest.raises(TableNotFound):
        tie_import.fetch_import_batch(
            "https://example.org", fetcher=lambda u: f"<html>{STANDINGS_TABLE}</html>"
        )
