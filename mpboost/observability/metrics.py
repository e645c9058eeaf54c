from dataclasses import dataclass, field
from typing import Any, Dict

from mpboost import logs


@dataclass
class MetricRecorder:
    """
    Run-level scalars of one job: num_docs, micro/macro scores, elapsed_ms.
    Last write wins.
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        shown = f"{value:.6f}" if isinstance(value, float) else value
        logs.info(f"[Metric] {name} = {shown}")

    def snapshot(self) -> Dict[str, Any]:
        return dict(self.metrics)
