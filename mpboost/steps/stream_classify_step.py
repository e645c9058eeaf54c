# mpboost/steps/stream_classify_step.py
from __future__ import annotations

from mpboost import logs
from mpboost.evaluation.aggregator import ResultAggregator
from mpboost.evaluation.contingency import ContingencyTable
from mpboost.evaluation.report import EffectivenessReporter
from mpboost.io.libsvm_source import LibSvmSource
from mpboost.io.result_writer import StreamingResultWriter
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.parallel.executor import ParallelExecutor, WorkerPool
from mpboost.pipeline.parallel.partition import split_partitions
from mpboost.pipeline.parallel.types import ParallelKind
from mpboost.pipeline.step import PipelineStep
from mpboost.steps.classify_step import TRANSIENT_ERRORS


class StreamClassifyStep(PipelineStep):
    """
    StreamClassifyStep (streaming mode)

    read batch -> partition -> classify -> write batch -> next batch

    - at most one batch of records / results alive at a time
    - a batch is fully written before the next one is read
    - output is staged and only lands on the destination once complete
    - one worker pool serves every batch
    - the running table is the merge of every batch table, equal to the
      batch-mode table for the same input
    """

    stage = "stream_classify"

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        if ctx.output_path is None:
            raise RuntimeError("StreamClassifyStep needs an output path")

        reporter = EffectivenessReporter(per_label=ctx.cfg.per_label_report)
        source = LibSvmSource(ctx.input_path)
        writer = StreamingResultWriter(ctx.output_path, reporter).open()

        # one pool per job: the model reaches each worker once, not once per batch
        pool = ParallelExecutor.open_pool(
            handler=ctx.handler,
            max_workers=ctx.parallelism,
            retry_on=TRANSIENT_ERRORS,
            max_attempts=ctx.cfg.partition_max_attempts,
        )
        try:
            table = self._classify_batches(ctx, source, writer, pool)
            with self.inst.timer("write_batches"):
                writer.finish(table)
        except BaseException:
            writer.abort()
            raise
        finally:
            if pool is not None:
                pool.close()

        if ctx.label_metrics_path is not None:
            reporter.export_label_metrics(table, ctx.label_metrics_path)
            logs.info(f"[{self.step_name}] label metrics -> {ctx.label_metrics_path}")

        ctx.table = table
        return ctx

    def _classify_batches(
            self,
            ctx: ClassifyContext,
            source: LibSvmSource,
            writer: StreamingResultWriter,
            pool: WorkerPool | None,
    ) -> ContingencyTable:
        aggregator = ResultAggregator(ctx.model.label_count)
        table = aggregator.merge_tables([])

        for n_batch, batch in enumerate(source.batches(ctx.cfg.batch_size)):
            with self.inst.timer("classify_batches"):
                partition_results = ParallelExecutor.run(
                    kind=ParallelKind.BATCH,
                    items=split_partitions(batch, ctx.parallelism),
                    handler=ctx.handler,
                    max_workers=ctx.parallelism,
                    retry_on=TRANSIENT_ERRORS,
                    max_attempts=ctx.cfg.partition_max_attempts,
                    verbose=ctx.cfg.enable_engine_logging,
                    pool=pool,
                )
            batch_results = aggregator.aggregate(partition_results)

            with self.inst.timer("write_batches"):
                writer.write_batch(
                    sorted(batch_results.results, key=lambda r: r.doc_id)
                    if ctx.cfg.sort_by_doc_id
                    else batch_results.results
                )

            table = table.merge(batch_results.table)
            logs.info(f"[{self.step_name}] batch {n_batch} done, docs so far={table.num_docs}")

        return table
