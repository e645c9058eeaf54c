# mpboost/steps/aggregate_step.py
from __future__ import annotations

from mpboost.evaluation.aggregator import ResultAggregator
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.step import PipelineStep


class AggregateStep(PipelineStep):
    """partition results -> ClassificationResults + global table"""

    stage = "aggregate"

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        with self.inst.timer("aggregate"):
            ctx.results = ResultAggregator(ctx.model.label_count).aggregate(ctx.partition_results)
        ctx.table = ctx.results.table
        ctx.partition_results = []
        return ctx
