# mpboost/evaluation/contingency.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np
import pandas as pd

from mpboost.core.types import ClassificationResult


def _ratio(num: float, den: float) -> float:
    # 0/0 -> 0 by definition
    return float(num) / float(den) if den else 0.0


def f_measure(precision: float, recall: float) -> float:
    return _ratio(2.0 * precision * recall, precision + recall)


@dataclass(frozen=True)
class LabelCounts:
    tp: int
    fp: int
    fn: int
    tn: int

    @property
    def precision(self) -> float:
        return _ratio(self.tp, self.tp + self.fp)

    @property
    def recall(self) -> float:
        return _ratio(self.tp, self.tp + self.fn)

    @property
    def f1(self) -> float:
        return f_measure(self.precision, self.recall)

    @property
    def accuracy(self) -> float:
        return _ratio(self.tp + self.tn, self.tp + self.fp + self.fn + self.tn)


class ContingencyTable:
    """
    ContingencyTable

    Per-label TP / FP / FN / TN counters.

    Invariants:
    - tp[l] + fp[l] + fn[l] + tn[l] == num_docs for every label l
    - merge() is plain integer addition: associative, commutative,
      identity == ContingencyTable(label_count)

    add() mutates (worker-local accumulation); merge() returns a new table.
    """

    def __init__(self, label_count: int):
        if label_count < 1:
            raise ValueError(f"label_count must be >= 1, got {label_count}")
        self.label_count = label_count
        self.num_docs = 0
        self.tp = np.zeros(label_count, dtype=np.int64)
        self.fp = np.zeros(label_count, dtype=np.int64)
        self.fn = np.zeros(label_count, dtype=np.int64)
        self.tn = np.zeros(label_count, dtype=np.int64)

    # --------------------------------------------------
    # accumulation
    # --------------------------------------------------
    def add(self, result: ClassificationResult) -> "ContingencyTable":
        assigned = np.zeros(self.label_count, dtype=bool)
        gold = np.zeros(self.label_count, dtype=bool)
        assigned[list(result.assigned_labels)] = True
        gold[list(result.gold_labels)] = True

        self.tp += assigned & gold
        self.fp += assigned & ~gold
        self.fn += ~assigned & gold
        self.tn += ~assigned & ~gold
        self.num_docs += 1
        return self

    def add_all(self, results: Iterable[ClassificationResult]) -> "ContingencyTable":
        for r in results:
            self.add(r)
        return self

    def merge(self, other: "ContingencyTable") -> "ContingencyTable":
        if other.label_count != self.label_count:
            raise ValueError(
                f"cannot merge tables with {self.label_count} and {other.label_count} labels"
            )
        out = ContingencyTable(self.label_count)
        out.num_docs = self.num_docs + other.num_docs
        out.tp = self.tp + other.tp
        out.fp = self.fp + other.fp
        out.fn = self.fn + other.fn
        out.tn = self.tn + other.tn
        return out

    __add__ = merge

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContingencyTable):
            return NotImplemented
        return (
            self.label_count == other.label_count
            and self.num_docs == other.num_docs
            and np.array_equal(self.tp, other.tp)
            and np.array_equal(self.fp, other.fp)
            and np.array_equal(self.fn, other.fn)
            and np.array_equal(self.tn, other.tn)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"ContingencyTable(labels={self.label_count}, docs={self.num_docs})"

    # --------------------------------------------------
    # views
    # --------------------------------------------------
    def label(self, label: int) -> LabelCounts:
        return LabelCounts(
            tp=int(self.tp[label]),
            fp=int(self.fp[label]),
            fn=int(self.fn[label]),
            tn=int(self.tn[label]),
        )

    def micro(self) -> LabelCounts:
        """Counts summed over every label/document decision."""
        return LabelCounts(
            tp=int(self.tp.sum()),
            fp=int(self.fp.sum()),
            fn=int(self.fn.sum()),
            tn=int(self.tn.sum()),
        )

    def is_conserved(self) -> bool:
        return bool(np.all(self.tp + self.fp + self.fn + self.tn == self.num_docs))

    def macro(self) -> Dict[str, float]:
        per_label = [self.label(l) for l in range(self.label_count)]
        precision = float(np.mean([c.precision for c in per_label]))
        recall = float(np.mean([c.recall for c in per_label]))
        f1 = float(np.mean([c.f1 for c in per_label]))
        return {"precision": precision, "recall": recall, "f1": f1}

    def to_frame(self) -> pd.DataFrame:
        """One row per label: counts + precision / recall / f1."""
        rows = []
        for l in range(self.label_count):
            c = self.label(l)
            rows.append(
                {
                    "label": l,
                    "tp": c.tp,
                    "fp": c.fp,
                    "fn": c.fn,
                    "tn": c.tn,
                    "precision": c.precision,
                    "recall": c.recall,
                    "f1": c.f1,
                }
            )
        return pd.DataFrame(rows).set_index("label")

    def summary(self) -> str:
        micro = self.micro()
        macro = self.macro()
        return "\n".join(
            [
                f"Documents: {self.num_docs}, Labels: {self.label_count}",
                f"Micro-averaged: TP: {micro.tp}, FP: {micro.fp}, FN: {micro.fn}, TN: {micro.tn}, "
                f"Precision: {micro.precision:.6f}, Recall: {micro.recall:.6f}, "
                f"F1: {micro.f1:.6f}, Accuracy: {micro.accuracy:.6f}",
                f"Macro-averaged: Precision: {macro['precision']:.6f}, "
                f"Recall: {macro['recall']:.6f}, F1: {macro['f1']:.6f}",
            ]
        )

    def __str__(self) -> str:
        return self.summary()
