# mpboost/evaluation/report.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from mpboost.core.types import ClassificationResult
from mpboost.evaluation.aggregator import ClassificationResults
from mpboost.evaluation.contingency import ContingencyTable

EFFECTIVENESS_HEADER = "**** Effectiveness"
EFFECTIVENESS_FOOTER = "********"


def _fmt_list(values: Iterable) -> str:
    return "[" + ", ".join(repr(v) for v in values) + "]"


class EffectivenessReporter:
    """
    EffectivenessReporter (FINAL)

    Layout:
        **** Effectiveness
        <contingency table summary>
        ********
        DocID: <id>, Labels assigned: [..], Labels scores: [..], Gold labels: [..]

    Scores are those of the assigned labels, aligned with "Labels assigned".
    Result lines follow the input order of `results` unless sort_by_doc_id.
    """

    def __init__(self, *, sort_by_doc_id: bool = False, per_label: bool = False):
        self.sort_by_doc_id = sort_by_doc_id
        self.per_label = per_label

    # --------------------------------------------------
    # sections
    # --------------------------------------------------
    def render_effectiveness(self, table: ContingencyTable) -> str:
        lines = [EFFECTIVENESS_HEADER, table.summary()]
        if self.per_label:
            lines.append(table.to_frame().to_string(float_format=lambda x: f"{x:.6f}"))
        lines.append(EFFECTIVENESS_FOOTER)
        return "\n".join(lines) + "\n"

    @staticmethod
    def render_result(result: ClassificationResult) -> str:
        return (
            f"DocID: {result.doc_id}, "
            f"Labels assigned: {_fmt_list(result.assigned_labels)}, "
            f"Labels scores: {_fmt_list(result.assigned_scores)}, "
            f"Gold labels: {_fmt_list(result.gold_labels)}"
        )

    def render_results(self, results: Sequence[ClassificationResult]) -> str:
        if self.sort_by_doc_id:
            results = sorted(results, key=lambda r: r.doc_id)
        return "".join(self.render_result(r) + "\n" for r in results)

    # --------------------------------------------------
    # full report (batch mode)
    # --------------------------------------------------
    def render(self, results: ClassificationResults) -> str:
        return self.render_effectiveness(results.table) + self.render_results(results.results)

    # --------------------------------------------------
    # per-label export
    # --------------------------------------------------
    @staticmethod
    def export_label_metrics(table: ContingencyTable, path: Path | str) -> Path:
        """
        Write the per-label metric table as parquet.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame = table.to_frame().reset_index()
        pq.write_table(pa.Table.from_pandas(frame, preserve_index=False), path)
        return path
