# mpboost/steps/read_records_step.py
from __future__ import annotations

from mpboost import logs
from mpboost.io.libsvm_source import LibSvmSource
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.step import PipelineStep


class ReadRecordsStep(PipelineStep):
    """Batch mode: materialise every (doc_id, line) record."""

    stage = "read"

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        with self.inst.timer("read_records"):
            ctx.records = LibSvmSource(ctx.input_path).read_all()

        logs.info(f"[{self.step_name}] {len(ctx.records)} records from {ctx.input_path}")
        return ctx
