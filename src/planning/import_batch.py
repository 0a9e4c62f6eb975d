"""Staged import batch: parsed fixtures plus their selection flags.

The batch is a plain value owned by the caller. A fetch produces a new batch;
selection changes only touch the candidates held here, never persisted data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

from domain.models import ImportCandidate


@dataclass
class ImportBatch:
    source_url: str | None = None
    candidates: List[ImportCandidate] = field(default_factory=list)
    skipped_rows: int = 0

    def __post_init__(self) -> None:
        self._check_unique(self.candidates)

    @staticmethod
    def _check_unique(candidates: Iterable[ImportCandidate]) -> None:
        seen: set[int] = set()
        for c in candidates:
            if c.id in seen:
                raise ValueError(f"Duplicate candidate id {c.id}")
            seen.add(c.id)

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self) -> Iterator[ImportCandidate]:
        return iter(self.candidates)

    def get(self, candidate_id: int) -> ImportCandidate:
        for c in self.candidates:
            if c.id == candidate_id:
                return c
        raise KeyError(candidate_id)

    def toggle(self, candidate_id: int) -> bool:
        """Flip one candidate's flag and return the new value."""
        c = self.get(candidate_id)
        c.selected = not c.selected
        return c.selected

    def set_selected(self, candidate_id: int, value: bool) -> None:
        self.get(candidate_id).selected = value

    def set_all(self, value: bool) -> None:
        for c in self.candidates:
            c.selected = value

    def replace(self, candidates: Iterable[ImportCandidate], source_url: str | None = None) -> None:
        """Discard everything staged so far, including selections."""
        fresh = list(candidates)
        self._check_unique(fresh)
        self.candidates = fresh
        self.source_url = source_url
        self.skipped_rows = 0

    def clear(self) -> None:
        self.replace([])

    def selected(self) -> List[ImportCandidate]:
        return [c for c in self.candidates if c.selected]

    def needs_review(self) -> List[ImportCandidate]:
        return [c for c in self.candidates if c.needs_review]
