# mpboost/evaluation/aggregator.py
from __future__ import annotations

from dataclasses import dataclass, field
from functools import reduce
from typing import Iterable, List

from mpboost.core.types import ClassificationResult
from mpboost.evaluation.contingency import ContingencyTable


@dataclass
class PartitionResult:
    """
    Output of one partition: its results (input order) and its local table.
    """
    partition_id: int
    table: ContingencyTable
    results: List[ClassificationResult] = field(default_factory=list)

    @property
    def num_docs(self) -> int:
        return self.table.num_docs


@dataclass
class ClassificationResults:
    """
    ClassificationResults (batch mode)

    Every result of the job plus the global contingency table.
    `results` keeps aggregator order (no cross-partition ordering).
    """
    table: ContingencyTable
    results: List[ClassificationResult]

    @property
    def num_docs(self) -> int:
        return len(self.results)

    def sorted_by_doc_id(self) -> List[ClassificationResult]:
        return sorted(self.results, key=lambda r: r.doc_id)

    def by_doc_id(self) -> dict[int, ClassificationResult]:
        return {r.doc_id: r for r in self.results}


class ResultAggregator:
    """
    ResultAggregator (FINAL)

    Folds PartitionResults in whatever order they arrive.
    Table merge is associative / commutative, so arrival order never
    changes the final table.
    """

    def __init__(self, label_count: int, *, keep_results: bool = True):
        self.label_count = label_count
        self.keep_results = keep_results

    def merge_tables(self, tables: Iterable[ContingencyTable]) -> ContingencyTable:
        return reduce(
            lambda acc, t: acc.merge(t), tables, ContingencyTable(self.label_count)
        )

    def aggregate(self, partitions: Iterable[PartitionResult]) -> ClassificationResults:
        partitions = list(partitions)
        results: List[ClassificationResult] = []
        if self.keep_results:
            for p in partitions:
                results.extend(p.results)
        table = self.merge_tables(p.table for p in partitions)
        return ClassificationResults(table=table, results=results)
