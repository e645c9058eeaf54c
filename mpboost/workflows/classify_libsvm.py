# mpboost/workflows/classify_libsvm.py
from __future__ import annotations

from pathlib import Path

from mpboost.config.classify_config import ClassifyConfig
from mpboost.evaluation.aggregator import ClassificationResults
from mpboost.evaluation.contingency import ContingencyTable
from mpboost.model.boost_model import BoostModel
from mpboost.observability.instrumentation import Instrumentation
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.parallel.partition import PartitionClassifier
from mpboost.pipeline.pipeline import ClassificationPipeline
from mpboost.steps.aggregate_step import AggregateStep
from mpboost.steps.classify_step import ClassifyPartitionsStep
from mpboost.steps.metrics_step import MetricsStep
from mpboost.steps.read_records_step import ReadRecordsStep
from mpboost.steps.report_step import WriteReportStep
from mpboost.steps.stream_classify_step import StreamClassifyStep


def _build_context(
        job: str,
        input_path: Path | str,
        model: BoostModel,
        cfg: ClassifyConfig,
        output_path: Path | str | None = None,
        label_metrics_path: Path | str | None = None,
) -> ClassifyContext:
    # model / flag validation happens here, before any input is read
    handler = PartitionClassifier(
        model,
        labels_0_based=cfg.labels_0_based,
        binary_problem=cfg.binary_problem,
        strict_dimensions=cfg.strict_dimensions,
    )
    return ClassifyContext(
        job=job,
        input_path=Path(input_path),
        model=model,
        cfg=cfg,
        handler=handler,
        output_path=Path(output_path) if output_path is not None else None,
        label_metrics_path=Path(label_metrics_path) if label_metrics_path is not None else None,
    )


# ============================================================
# Batch mode
# ============================================================
def run_batch_classification(
        input_path: Path | str,
        model: BoostModel,
        output_path: Path | str | None = None,
        cfg: ClassifyConfig | None = None,
        *,
        label_metrics_path: Path | str | None = None,
        inst: Instrumentation | None = None,
) -> ClassifyContext:
    """
    read -> classify partitions -> aggregate -> metrics -> report
    """
    cfg = cfg or ClassifyConfig()
    inst = inst or Instrumentation()

    ctx = _build_context(
        "classify_with_results", input_path, model, cfg, output_path, label_metrics_path
    )
    steps = [
        ReadRecordsStep(inst=inst),
        ClassifyPartitionsStep(inst=inst),
        AggregateStep(inst=inst),
        MetricsStep(inst=inst),
        WriteReportStep(inst=inst),
    ]
    return ClassificationPipeline(steps, inst=inst).run(ctx)


def classify_libsvm_with_results(
        input_path: Path | str,
        model: BoostModel,
        cfg: ClassifyConfig | None = None,
        *,
        inst: Instrumentation | None = None,
) -> ClassificationResults:
    """
    Classify every document of a LibSVM file and keep all results in memory.
    """
    ctx = run_batch_classification(input_path, model, None, cfg, inst=inst)
    return ctx.results


# ============================================================
# Streaming mode
# ============================================================
def classify_libsvm(
        input_path: Path | str,
        model: BoostModel,
        output_path: Path | str,
        cfg: ClassifyConfig | None = None,
        *,
        label_metrics_path: Path | str | None = None,
        inst: Instrumentation | None = None,
) -> ContingencyTable:
    """
    Classify a LibSVM file batch by batch (cfg.batch_size records at a
    time), appending result lines to output_path, then the effectiveness
    section. Returns the final contingency table. Nothing lands on
    output_path unless the whole input was classified.
    """
    cfg = cfg or ClassifyConfig()
    inst = inst or Instrumentation()

    ctx = _build_context(
        "classify_streaming", input_path, model, cfg, output_path, label_metrics_path
    )
    steps = [
        StreamClassifyStep(inst=inst),
        MetricsStep(inst=inst),
    ]
    return ClassificationPipeline(steps, inst=inst).run(ctx).table
