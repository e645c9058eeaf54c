# mpboost/steps/metrics_step.py
from __future__ import annotations

from mpboost import logs
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.step import PipelineStep


class MetricsStep(PipelineStep):
    """derive run-level metrics from ctx.table (pure read)"""

    stage = "metrics"

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        if ctx.table is None:
            logs.warning(f"[{self.step_name}] no contingency table, skip")
            return ctx

        micro = ctx.table.micro()
        macro = ctx.table.macro()
        metrics = {
            "num_docs": ctx.table.num_docs,
            "micro_precision": micro.precision,
            "micro_recall": micro.recall,
            "micro_f1": micro.f1,
            "macro_f1": macro["f1"],
        }
        for name, value in metrics.items():
            self.inst.metrics.record(name, value)
        ctx.metrics.update(metrics)
        return ctx
