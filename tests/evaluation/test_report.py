from __future__ import annotations

import pyarrow.parquet as pq

from mpboost.core.types import ClassificationResult
from mpboost.evaluation.aggregator import ClassificationResults
from mpboost.evaluation.contingency import ContingencyTable
from mpboost.evaluation.report import EffectivenessReporter


def _results():
    rs = [
        ClassificationResult(doc_id=1, assigned_labels=(0, 1), scores={0: 1.5, 1: 0.8, 2: -1.0},
                             gold_labels=(0, 1)),
        ClassificationResult(doc_id=0, assigned_labels=(2,), scores={0: -0.5, 1: -0.8, 2: 1.0},
                             gold_labels=(2,)),
    ]
    return ClassificationResults(table=ContingencyTable(3).add_all(rs), results=rs)


def test_result_line_layout():
    line = EffectivenessReporter.render_result(_results().results[0])
    assert line == "DocID: 1, Labels assigned: [0, 1], Labels scores: [1.5, 0.8], Gold labels: [0, 1]"


def test_empty_lists_render_as_brackets():
    r = ClassificationResult(doc_id=5, assigned_labels=(), scores={0: -1.0}, gold_labels=())
    assert EffectivenessReporter.render_result(r) == (
        "DocID: 5, Labels assigned: [], Labels scores: [], Gold labels: []"
    )


def test_full_report_structure():
    text = EffectivenessReporter().render(_results())
    lines = text.splitlines()

    assert lines[0] == "**** Effectiveness"
    footer = lines.index("********")
    assert lines[1].startswith("Documents: 2")
    assert lines[footer + 1].startswith("DocID: 1,")
    assert lines[footer + 2].startswith("DocID: 0,")
    assert text.endswith("\n")


def test_sorted_report():
    text = EffectivenessReporter(sort_by_doc_id=True).render(_results())
    doc_lines = [l for l in text.splitlines() if l.startswith("DocID")]
    assert [l.split(",")[0] for l in doc_lines] == ["DocID: 0", "DocID: 1"]


def test_per_label_section():
    text = EffectivenessReporter(per_label=True).render_effectiveness(_results().table)
    assert "precision" in text
    assert "recall" in text


def test_export_label_metrics(tmp_path):
    path = EffectivenessReporter.export_label_metrics(_results().table, tmp_path / "m" / "labels.parquet")

    frame = pq.read_table(path).to_pandas()
    assert list(frame["label"]) == [0, 1, 2]
    assert list(frame["tp"]) == [1, 1, 1]
