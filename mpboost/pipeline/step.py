# mpboost/pipeline/step.py
from __future__ import annotations

from mpboost.pipeline.context import ClassifyContext
from mpboost.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Pipeline Step base class

    Responsibilities:
      1. orchestration of one stage of a classification job
      2. step-level time boundary (parent scope)

    Rules:
      - the step itself is not recorded in the timeline
      - leaf timers live inside run()
      - step behaviour never depends on whether inst is injected
    """

    stage: str = ''

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    def timed(self):
        """step-level scope, record=False"""
        return self.inst.timer(self.step_name, record=False)

    def run(self, ctx: ClassifyContext) -> ClassifyContext:
        raise NotImplementedError
