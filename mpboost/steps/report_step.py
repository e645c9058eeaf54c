# mpboost/steps/report_step.py
from __future__ import annotations

from mpboost import logs
from mpboost.evaluation.report import EffectivenessReporter
from mpboost.io.result_writer import BatchReportWriter
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.step import PipelineStep


class WriteReportStep(PipelineStep):
    """
    WriteReportStep

    - read-only on ctx.results
    - writes the effectiveness section + one line per document
    - optional per-label metrics parquet
    """

    stage = "report"

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        if ctx.results is None:
            raise RuntimeError("WriteReportStep needs aggregated results")

        reporter = EffectivenessReporter(
            sort_by_doc_id=ctx.cfg.sort_by_doc_id,
            per_label=ctx.cfg.per_label_report,
        )

        if ctx.output_path is not None:
            with self.inst.timer("write_report"):
                BatchReportWriter(ctx.output_path).write(reporter.render(ctx.results))

        if ctx.label_metrics_path is not None:
            reporter.export_label_metrics(ctx.results.table, ctx.label_metrics_path)
            logs.info(f"[{self.step_name}] label metrics -> {ctx.label_metrics_path}")

        return ctx
