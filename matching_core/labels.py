# matching_core/labels.py
"""
Label <-> index bookkeeping for graph solvers.

A LabelGroup hands out consecutive 0-based indices to labels the first time
they are seen, and remembers the reverse mapping so results can be decoded.
Groups are meant to live for exactly one solve:

    with LabelGroup() as rows:
        i = rows.index_of("alice")
        ...
    # rows is empty again here, even if the block raised
"""
from __future__ import annotations
from typing import Dict, Hashable, Iterator, List


class LabelGroup:
    def __init__(self) -> None:
        self._to_index: Dict[Hashable, int] = {}
        self._to_label: List[Hashable] = []

    def index_of(self, label: Hashable) -> int:
        """Return the label's index, allocating the next one if it is new."""
        index = self._to_index.get(label)
        if index is None:
            index = len(self._to_label)
            self._to_index[label] = index
            self._to_label.append(label)
        return index

    def label_at(self, index: int) -> Hashable:
        return self._to_label[index]

    @property
    def labels(self) -> List[Hashable]:
        return list(self._to_label)

    def clear(self) -> None:
        """Forget every mapping, newest first."""
        while self._to_label:
            del self._to_index[self._to_label.pop()]

    def __len__(self) -> int:
        return len(self._to_label)

    def __contains__(self, label: object) -> bool:
        return label in self._to_index

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._to_label)

    def __enter__(self) -> "LabelGroup":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()
