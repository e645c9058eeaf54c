#!filepath: mpboost/engines/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Iterator, TypeVar

InEvent = TypeVar("InEvent")
OutEvent = TypeVar("OutEvent")


class BaseEngine(ABC, Generic[InEvent, OutEvent]):
    """
    Engine layer: one record in, one value out.

    Engines do no I/O and keep no per-call state, so one instance can be
    pickled to a worker and reused for every record of a partition.
    """

    @abstractmethod
    def process(self, event: InEvent) -> OutEvent:
        raise NotImplementedError

    def process_stream(self, events: Iterable[InEvent]) -> Iterator[OutEvent]:
        """lazy, input order"""
        return map(self.process, events)
