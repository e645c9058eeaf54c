# mpboost/steps/classify_step.py
from __future__ import annotations

from mpboost import logs
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.parallel.executor import ParallelExecutor
from mpboost.pipeline.parallel.partition import split_partitions
from mpboost.pipeline.parallel.types import ParallelKind
from mpboost.pipeline.step import PipelineStep

# infrastructure errors a partition may be retried on; data errors never are
TRANSIENT_ERRORS = (OSError,)


class ClassifyPartitionsStep(PipelineStep):
    """
    Batch mode: split records into `parallelism` partitions and parse + score
    them concurrently.
    """

    stage = "classify"

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        records = ctx.records or []
        partitions = split_partitions(records, ctx.parallelism)

        with self.inst.timer("classify_partitions"):
            ctx.partition_results = ParallelExecutor.run(
                kind=ParallelKind.PARTITION,
                items=partitions,
                handler=ctx.handler,
                max_workers=ctx.parallelism,
                retry_on=TRANSIENT_ERRORS,
                max_attempts=ctx.cfg.partition_max_attempts,
                verbose=ctx.cfg.enable_engine_logging,
            )

        # records are no longer needed once scored
        ctx.records = None

        logs.info(
            f"[{self.step_name}] classified {sum(p.num_docs for p in ctx.partition_results)} docs "
            f"in {len(partitions)} partitions"
        )
        return ctx
