from __future__ import annotations

import itertools
import random

import numpy as np
import pytest
from sklearn.metrics import f1_score, precision_score, recall_score

from mpboost.core.types import ClassificationResult
from mpboost.evaluation.contingency import ContingencyTable, LabelCounts


def _result(doc_id, assigned, gold, label_count=3):
    return ClassificationResult(
        doc_id=doc_id,
        assigned_labels=tuple(sorted(assigned)),
        scores={l: (1.0 if l in assigned else -1.0) for l in range(label_count)},
        gold_labels=tuple(sorted(gold)),
    )


def _random_results(n, label_count, seed):
    rng = random.Random(seed)
    out = []
    for i in range(n):
        assigned = {l for l in range(label_count) if rng.random() < 0.4}
        gold = {l for l in range(label_count) if rng.random() < 0.3}
        out.append(_result(i, assigned, gold, label_count))
    return out


# ============================================================
# 1. classification of decisions
# ============================================================
def test_single_tp_and_tn_elsewhere():
    table = ContingencyTable(3).add(_result(1, {2}, {2}))

    assert table.label(2) == LabelCounts(tp=1, fp=0, fn=0, tn=0)
    assert table.label(0) == LabelCounts(tp=0, fp=0, fn=0, tn=1)
    assert table.label(1) == LabelCounts(tp=0, fp=0, fn=0, tn=1)


def test_fp_and_fn():
    table = ContingencyTable(3).add(_result(0, {0}, {1}))

    assert table.label(0) == LabelCounts(tp=0, fp=1, fn=0, tn=0)
    assert table.label(1) == LabelCounts(tp=0, fp=0, fn=1, tn=0)
    assert table.label(2) == LabelCounts(tp=0, fp=0, fn=0, tn=1)


def test_conservation_during_accumulation():
    table = ContingencyTable(5)
    for i, r in enumerate(_random_results(50, 5, seed=1), start=1):
        table.add(r)
        assert table.num_docs == i
        assert table.is_conserved()


# ============================================================
# 2. merge
# ============================================================
def test_merge_is_order_independent():
    results = _random_results(40, 4, seed=7)
    chunks = [results[0:5], results[5:17], results[17:18], results[18:40]]
    tables = [ContingencyTable(4).add_all(c) for c in chunks]
    expected = ContingencyTable(4).add_all(results)

    for perm in itertools.permutations(tables):
        left = perm[0].merge(perm[1]).merge(perm[2]).merge(perm[3])
        tree = perm[0].merge(perm[1]).merge(perm[2].merge(perm[3]))
        right = perm[0].merge(perm[1].merge(perm[2].merge(perm[3])))
        assert left == expected
        assert tree == expected
        assert right == expected


def test_merge_identity_and_purity():
    table = ContingencyTable(3).add_all(_random_results(10, 3, seed=3))
    before = table.tp.copy()

    merged = table.merge(ContingencyTable(3))

    assert merged == table
    assert merged is not table
    assert np.array_equal(table.tp, before)
    assert table + ContingencyTable(3) == table


def test_merge_rejects_label_count_mismatch():
    with pytest.raises(ValueError):
        ContingencyTable(2).merge(ContingencyTable(3))


# ============================================================
# 3. metrics
# ============================================================
def test_zero_denominators_are_zero():
    c = LabelCounts(tp=0, fp=0, fn=0, tn=0)
    assert c.precision == 0.0
    assert c.recall == 0.0
    assert c.f1 == 0.0
    assert c.accuracy == 0.0


def test_micro_metrics_match_sklearn():
    label_count = 6
    results = _random_results(200, label_count, seed=11)
    table = ContingencyTable(label_count).add_all(results)

    y_true = np.zeros((len(results), label_count), dtype=int)
    y_pred = np.zeros((len(results), label_count), dtype=int)
    for i, r in enumerate(results):
        y_true[i, list(r.gold_labels)] = 1
        y_pred[i, list(r.assigned_labels)] = 1

    micro = table.micro()
    assert micro.f1 == pytest.approx(f1_score(y_true, y_pred, average="micro", zero_division=0))
    assert micro.precision == pytest.approx(
        precision_score(y_true, y_pred, average="micro", zero_division=0)
    )
    assert micro.recall == pytest.approx(recall_score(y_true, y_pred, average="micro", zero_division=0))
    assert table.macro()["f1"] == pytest.approx(
        f1_score(y_true, y_pred, average="macro", zero_division=0)
    )


def test_to_frame_one_row_per_label():
    table = ContingencyTable(3).add(_result(1, {2}, {2}))
    frame = table.to_frame()

    assert list(frame.index) == [0, 1, 2]
    assert frame.loc[2, "tp"] == 1
    assert frame.loc[2, "f1"] == 1.0
    assert frame.loc[0, "tn"] == 1


def test_summary_text():
    table = ContingencyTable(3).add(_result(1, {2}, {2}))
    text = table.summary()

    assert "Documents: 1, Labels: 3" in text
    assert "TP: 1, FP: 0, FN: 0, TN: 2" in text
    assert "F1: 1.000000" in text
