from typing import Dict

from mpboost import logs


class TimelineReporter:
    """
    Logs the leaf timeline of one job: name, seconds, share of the total.
    """

    def __init__(self, timeline: Dict[str, float], job: str):
        self.timeline = timeline
        self.job = job

    def print(self):
        total = sum(self.timeline.values())
        logs.info(f"[Timeline] ===== timeline for {self.job} =====")

        for name, sec in self.timeline.items():
            share = 100.0 * sec / total if total > 0 else 0.0
            logs.info(f"[Timeline] {name:<24} {sec:>9.3f}s {share:>5.1f}%")

        logs.info(f"[Timeline] {'Total':<24} {total:>9.3f}s")
