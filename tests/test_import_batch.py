from __future__ import annotations

import pytest

from planning.import_batch import ImportBatch
from tests.factories import candidate


def _batch(n: int = 4) -> ImportBatch:
    return ImportBatch(source_url="https://example.org", candidates=[candidate(i) for i in range(n)])


def test_candidates_start_selected():
    batch = _batch()
    assert len(batch.selected()) == 4


def test_toggle_one_leaves_others_unchanged():
    batch = _batch()
    assert batch.toggle(2) is False
    assert [c.selected for c in batch] == [True, True, False, True]
    assert batch.toggle(2) is True
    assert all(c.selected for c in batch)


def test_select_all_overrides_individual_state():
    batch = _batch()
    batch.toggle(0)
    batch.toggle(3)
    batch.set_all(True)
    assert all(c.selected for c in batch)
    batch.set_all(False)
    assert batch.selected() == []


def test_unknown_id_raises_key_error():
    with pytest.raises(KeyError):
        _batch().toggle(99)


def test_replace_discards_previous_selection():
    batch = _batch()
    batch.set_all(False)
    batch.skipped_rows = 3
    batch.replace([candidate(0), candidate(1)], source_url="https://example.org/new")
    assert len(batch) == 2
    assert all(c.selected for c in batch)
    assert batch.skipped_rows == 0
    assert batch.source_url == "https://example.org/new"


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        ImportBatch(candidates=[candidate(1), candidate(1)])


def test_needs_review_lists_flagged_rows():
    batch = ImportBatch(candidates=[candidate(0), candidate(1, needs_review=True)])
    assert [c.id for c in batch.needs_review()] == [1]
