#!filepath: mpboost/pipeline/pipeline.py
from __future__ import annotations

import time

from mpboost import logs
from mpboost.observability.instrumentation import Instrumentation, NoOpInstrumentation
from mpboost.pipeline.context import ClassifyContext
from mpboost.pipeline.step import PipelineStep


class ClassificationPipeline:
    """
    ClassificationPipeline = scheduler

    - owns step order and the context hand-off
    - steps own their timers
    - any exception aborts the job: no later step (report) runs
    """

    def __init__(
            self,
            steps: list[PipelineStep],
            inst: Instrumentation | NoOpInstrumentation | None = None,
    ):
        self.steps = steps
        self.inst = inst if inst is not None else NoOpInstrumentation()

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        logs.info(f"[Pipeline] ====== START {ctx.job} ======")
        start = time.perf_counter()

        for step in self.steps:
            logs.debug(f"[Pipeline] -> {step.step_name} (stage={step.stage})")
            with step.timed():
                ctx = step.run(ctx)

        self.inst.metrics.record("elapsed_ms", round((time.perf_counter() - start) * 1000, 3))
        self.inst.generate_timeline_report(ctx.job)
        logs.info(f"[Pipeline] ====== DONE {ctx.job} ======")
        return ctx
