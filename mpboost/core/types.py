# mpboost/core/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple


@dataclass(frozen=True)
class Document:
    """
    Document (FROZEN)

    One parsed LibSVM record.
    - features: 0-based feature index -> value (absent == 0.0)
    - gold_labels: 0-based label ids
    """

    doc_id: int
    features: Dict[int, float] = field(hash=False)
    gold_labels: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class ClassificationResult:
    """
    ClassificationResult (FROZEN)

    - assigned_labels: sorted labels whose score exceeds the decision threshold
    - scores: score of every label of the model
    - gold_labels: sorted gold labels (after dimension policy)
    """

    doc_id: int
    assigned_labels: Tuple[int, ...]
    scores: Dict[int, float] = field(hash=False)
    gold_labels: Tuple[int, ...] = ()

    @property
    def assigned_scores(self) -> Tuple[float, ...]:
        """Scores aligned with `assigned_labels`."""
        return tuple(self.scores[label] for label in self.assigned_labels)
