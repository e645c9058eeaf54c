# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from mpboost.model.boost_model import BoostModel, ModelKind, WeakHypothesis


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


# ------------------------------------------------------------
# models
# ------------------------------------------------------------
@pytest.fixture
def multilabel_model() -> BoostModel:
    """
    4 labels, 10 features (0-based)

    label 0: f0 > 0.5 (+1, w=1.0), f1 > 0.0 (-1, w=0.5)
    label 1: f2 > 0.3 (+1, w=0.8)
    label 2: f3 > 0.5 (+1, w=1.0)
    label 3: no hypotheses (always 0.0 -> never assigned)
    """
    return BoostModel.from_hypotheses(
        [
            WeakHypothesis(feature_index=3, threshold=0.5, polarity=1, weight=1.0, label=2),
            WeakHypothesis(feature_index=0, threshold=0.5, polarity=1, weight=1.0, label=0),
            WeakHypothesis(feature_index=1, threshold=0.0, polarity=-1, weight=0.5, label=0),
            WeakHypothesis(feature_index=2, threshold=0.3, polarity=1, weight=0.8, label=1),
        ],
        label_count=4,
        feature_count=10,
    )


@pytest.fixture
def binary_model() -> BoostModel:
    return BoostModel.from_hypotheses(
        [
            WeakHypothesis(feature_index=0, threshold=0.5, polarity=1, weight=1.0, label=0),
            WeakHypothesis(feature_index=1, threshold=0.0, polarity=-1, weight=0.5, label=0),
        ],
        label_count=1,
        feature_count=5,
        kind=ModelKind.BINARY,
    )


# ------------------------------------------------------------
# datasets (1-based ids)
# ------------------------------------------------------------
MULTILABEL_LINES = [
    "3 4:1.0 8:0.5",       # doc 0 -> assigned [2], gold [2]
    "1,2 1:0.9 3:0.7",     # doc 1 -> assigned [0, 1], gold [0, 1]
    "4 2:1.0",             # doc 2 -> assigned [], gold [3]
    "",
    "1 1:0.2 4:0.6",       # doc 3 -> assigned [2], gold [0]
    "2,3 3:0.1",           # doc 4 -> assigned [], gold [1, 2]
]

BINARY_LINES = [
    "+1 1:0.9",            # score 1.5  -> positive, gold positive
    "-1 2:1.0",            # score -1.5 -> negative, gold negative
    "1 1:0.1 2:0.0",       # score -0.5 -> negative, gold positive
]


@pytest.fixture
def write_libsvm(tmp_path: Path):
    def _write(lines, name: str = "data.svm") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def multilabel_file(write_libsvm) -> Path:
    return write_libsvm(MULTILABEL_LINES, "multilabel.svm")


@pytest.fixture
def binary_file(write_libsvm) -> Path:
    return write_libsvm(BINARY_LINES, "binary.svm")
