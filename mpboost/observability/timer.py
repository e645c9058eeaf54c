import time
from collections import defaultdict
from typing import DefaultDict, List


class Timer:
    """
    Named stopwatch on perf_counter_ns.

    The same name may be started again before it ends (nested or repeated
    steps); end() closes the most recent start. Ending a name that was never
    started reads as 0.0 seconds.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._open: DefaultDict[str, List[int]] = defaultdict(list)

    def start(self, name: str):
        if self.enabled:
            self._open[name].append(time.perf_counter_ns())

    def end(self, name: str) -> float:
        starts = self._open.get(name)
        if not self.enabled or not starts:
            return 0.0
        return (time.perf_counter_ns() - starts.pop()) / 1e9
