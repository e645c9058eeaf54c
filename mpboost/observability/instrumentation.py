#!filepath: mpboost/observability/instrumentation.py
from __future__ import annotations

from collections import OrderedDict
from contextlib import nullcontext
from typing import Dict

from mpboost.observability.metrics import MetricRecorder
from mpboost.observability.timeline_reporter import TimelineReporter
from mpboost.observability.timer import Timer


class _LeafTimer:
    """times one `with` block; adds to the timeline when record=True"""

    def __init__(self, inst: "Instrumentation", name: str, record: bool):
        self.inst = inst
        self.name = name
        self.record = record

    def __enter__(self):
        self.inst._timer.start(self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        elapsed = self.inst._timer.end(self.name)
        if self.record:
            timeline = self.inst.timeline
            timeline[self.name] = timeline.get(self.name, 0.0) + elapsed
        return False


class Instrumentation:
    """
    Per-job time accounting + run metrics.

    - timeline holds leaf timers only (record=True); repeated names add up,
      so per-batch timers in streaming mode report their total
    - step-level timers are scope boundaries (record=False)
    - nothing here logs per document
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._timer = Timer(enabled=enabled)
        self.metrics = MetricRecorder(enabled=enabled)
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        if not self.enabled:
            return nullcontext()
        return _LeafTimer(self, name, record)

    def generate_timeline_report(self, job: str):
        if self.enabled:
            TimelineReporter(self.timeline, job).print()


class NoOpInstrumentation:
    """Stand-in when a step or pipeline gets no Instrumentation."""

    def __init__(self):
        self.metrics = MetricRecorder(enabled=False)
        self.timeline: Dict[str, float] = {}

    def timer(self, name: str, *, record: bool = True):
        return nullcontext()

    def generate_timeline_report(self, job: str):
        pass
