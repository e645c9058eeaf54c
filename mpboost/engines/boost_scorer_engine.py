# mpboost/engines/boost_scorer_engine.py
from __future__ import annotations

from typing import Dict

import numpy as np

from mpboost.core.types import ClassificationResult, Document
from mpboost.engines.base import BaseEngine
from mpboost.model.boost_model import DECISION_THRESHOLD, BoostModel, ModelKind
from mpboost.utils.errors import ModelDimensionMismatchError


class BoostScorerEngine(BaseEngine[Document, ClassificationResult]):
    """
    BoostScorerEngine (FINAL / FROZEN)

    Document -> ClassificationResult, pure and deterministic.

    score[label] = sum over the label's hypotheses of
                   weight * polarity * (+1 if x[f] > threshold else -1)

    Missing features read as 0.0. A label is assigned iff
    score > DECISION_THRESHOLD.

    Dimension policy:
    - strict     : out-of-space feature / gold label -> ModelDimensionMismatchError
    - permissive : out-of-space features dropped, out-of-space gold labels dropped
    """

    def __init__(self, model: BoostModel, *, binary_problem: bool = False, strict: bool = True):
        if binary_problem != model.is_binary:
            raise ModelDimensionMismatchError(
                f"binary_problem={binary_problem} but model kind is {model.kind.value}"
            )
        self.model = model
        self.strict = strict

    def process(self, event: Document) -> ClassificationResult:
        return self.score(event)

    # --------------------------------------------------
    def score(self, doc: Document) -> ClassificationResult:
        features, gold = self._conform(doc)

        match self.model.kind:
            case ModelKind.BINARY:
                scores = self._score_binary(features)
            case ModelKind.MULTILABEL:
                scores = self._score_multilabel(features)
            case _:
                raise ValueError(f"unknown model kind {self.model.kind}")

        assigned = tuple(
            label for label, s in enumerate(scores) if s > DECISION_THRESHOLD
        )
        return ClassificationResult(
            doc_id=doc.doc_id,
            assigned_labels=assigned,
            scores={label: float(s) for label, s in enumerate(scores)},
            gold_labels=tuple(sorted(gold)),
        )

    # --------------------------------------------------
    # scoring paths
    # --------------------------------------------------
    def _votes(self, features: Dict[int, float]) -> np.ndarray:
        f_idx, threshold, signed_weight, _ = self.model.columns
        if f_idx.size == 0:
            return np.zeros(0, dtype=np.float64)

        # sparse lookup: sorted doc indices, missing -> 0.0
        if features:
            doc_idx = np.fromiter(sorted(features), dtype=np.int64, count=len(features))
            doc_val = np.fromiter(
                (features[i] for i in doc_idx.tolist()), dtype=np.float64, count=len(features)
            )
            pos = np.searchsorted(doc_idx, f_idx)
            pos_clipped = np.minimum(pos, doc_idx.size - 1)
            present = doc_idx[pos_clipped] == f_idx
            values = np.where(present, doc_val[pos_clipped], 0.0)
        else:
            values = np.zeros(f_idx.size, dtype=np.float64)

        side = np.where(values > threshold, 1.0, -1.0)
        return signed_weight * side

    def _score_multilabel(self, features: Dict[int, float]) -> np.ndarray:
        _, _, _, labels = self.model.columns
        return np.bincount(
            labels, weights=self._votes(features), minlength=self.model.label_count
        )

    def _score_binary(self, features: Dict[int, float]) -> np.ndarray:
        return np.array([self._votes(features).sum()], dtype=np.float64)

    # --------------------------------------------------
    # dimension policy
    # --------------------------------------------------
    def _conform(self, doc: Document):
        feature_count = self.model.feature_count
        label_count = self.model.label_count

        bad_features = [i for i in doc.features if i >= feature_count]
        bad_labels = [l for l in doc.gold_labels if l >= label_count]

        if not bad_features and not bad_labels:
            return doc.features, doc.gold_labels

        if self.strict:
            raise ModelDimensionMismatchError(
                f"record outside model space: features={sorted(bad_features)[:5]} "
                f"(feature_count={feature_count}) labels={sorted(bad_labels)} "
                f"(label_count={label_count})",
                doc_id=doc.doc_id,
            )

        features = {i: v for i, v in doc.features.items() if i < feature_count}
        gold = frozenset(l for l in doc.gold_labels if l < label_count)
        return features, gold
