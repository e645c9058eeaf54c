# mpboost/model/boost_model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple

import numpy as np

# margin-sign rule: a label is assigned iff its score is strictly above this
DECISION_THRESHOLD = 0.0


class ModelKind(str, Enum):
    BINARY = "binary"
    MULTILABEL = "multilabel"


@dataclass(frozen=True)
class WeakHypothesis:
    """
    Single-feature decision stump voting for one label:

        vote = weight * polarity * (+1 if x[feature_index] > threshold else -1)
    """

    feature_index: int
    threshold: float
    polarity: int
    weight: float
    label: int

    def __post_init__(self):
        if self.polarity not in (1, -1):
            raise ValueError(f"polarity must be +1 or -1, got {self.polarity}")
        if self.feature_index < 0 or self.label < 0:
            raise ValueError(
                f"negative index in hypothesis: feature={self.feature_index} label={self.label}"
            )


@dataclass(frozen=True)
class BoostModel:
    """
    BoostModel (FINAL / FROZEN)

    Read-only ensemble shared by every worker.

    - BINARY     : one label dimension (label 0 == positive class)
    - MULTILABEL : `label_count` independent label dimensions

    Hypotheses are stored grouped by label (stable order inside a label) and
    mirrored into read-only numpy columns for vectorised scoring.
    """

    kind: ModelKind
    label_count: int
    feature_count: int
    hypotheses: Tuple[WeakHypothesis, ...]
    name: str = "mpboost"

    _feature_index: np.ndarray = field(init=False, repr=False, compare=False)
    _threshold: np.ndarray = field(init=False, repr=False, compare=False)
    _signed_weight: np.ndarray = field(init=False, repr=False, compare=False)
    _label: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        kind = ModelKind(self.kind)
        object.__setattr__(self, "kind", kind)

        if self.label_count < 1:
            raise ValueError(f"label_count must be >= 1, got {self.label_count}")
        if kind is ModelKind.BINARY and self.label_count != 1:
            raise ValueError(
                f"a binary model has exactly one label dimension, got {self.label_count}"
            )

        hyps = tuple(sorted(self.hypotheses, key=lambda h: h.label))
        for h in hyps:
            if h.label >= self.label_count:
                raise ValueError(f"hypothesis label {h.label} >= label_count {self.label_count}")
            if h.feature_index >= self.feature_count:
                raise ValueError(
                    f"hypothesis feature {h.feature_index} >= feature_count {self.feature_count}"
                )
        object.__setattr__(self, "hypotheses", hyps)

        self._set_column("_feature_index", [h.feature_index for h in hyps], np.int64)
        self._set_column("_threshold", [h.threshold for h in hyps], np.float64)
        self._set_column("_signed_weight", [h.weight * h.polarity for h in hyps], np.float64)
        self._set_column("_label", [h.label for h in hyps], np.int64)

    def _set_column(self, name: str, values: list, dtype) -> None:
        arr = np.asarray(values, dtype=dtype)
        arr.setflags(write=False)
        object.__setattr__(self, name, arr)

    # --------------------------------------------------
    # pickling: columns are derived, rebuild them on load
    # --------------------------------------------------
    def __getstate__(self):
        return {
            "kind": self.kind,
            "label_count": self.label_count,
            "feature_count": self.feature_count,
            "hypotheses": self.hypotheses,
            "name": self.name,
        }

    def __setstate__(self, state):
        for key, value in state.items():
            object.__setattr__(self, key, value)
        self.__post_init__()

    # --------------------------------------------------
    @classmethod
    def from_hypotheses(
            cls,
            hypotheses: Iterable[WeakHypothesis],
            *,
            label_count: int,
            feature_count: int,
            kind: ModelKind = ModelKind.MULTILABEL,
            name: str = "mpboost",
    ) -> "BoostModel":
        return cls(
            kind=kind,
            label_count=label_count,
            feature_count=feature_count,
            hypotheses=tuple(hypotheses),
            name=name,
        )

    @property
    def is_binary(self) -> bool:
        return self.kind is ModelKind.BINARY

    @property
    def columns(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """(feature_index, threshold, weight*polarity, label), all read-only."""
        return self._feature_index, self._threshold, self._signed_weight, self._label
