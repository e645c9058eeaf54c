# mpboost/pipeline/parallel/partition.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from mpboost.engines.boost_scorer_engine import BoostScorerEngine
from mpboost.engines.libsvm_parser_engine import LibSvmParserEngine, Record
from mpboost.evaluation.aggregator import PartitionResult
from mpboost.evaluation.contingency import ContingencyTable
from mpboost.model.boost_model import BoostModel


@dataclass(frozen=True)
class Partition:
    partition_id: int
    records: Tuple[Record, ...]

    def __len__(self) -> int:
        return len(self.records)


def split_partitions(records: Sequence[Record], n: int) -> List[Partition]:
    """
    Cut `records` into at most n contiguous, non-empty partitions.
    Sizes differ by at most one; input order is preserved.
    """
    if n < 1:
        raise ValueError(f"number of partitions must be >= 1, got {n}")

    total = len(records)
    n = min(n, total)
    if n == 0:
        return []

    base, extra = divmod(total, n)
    partitions = []
    start = 0
    for pid in range(n):
        size = base + (1 if pid < extra else 0)
        partitions.append(Partition(pid, tuple(records[start:start + size])))
        start += size
    return partitions


class PartitionClassifier:
    """
    PartitionClassifier (worker handler)

    Stateless apart from the shared read-only model: parse + score every
    record of a partition in input order, accumulate a local table.
    Picklable, so it can be shipped to worker processes as is.
    """

    def __init__(
            self,
            model: BoostModel,
            *,
            labels_0_based: bool = False,
            binary_problem: bool = False,
            strict_dimensions: bool = True,
            keep_results: bool = True,
    ):
        self.parser = LibSvmParserEngine(
            labels_0_based=labels_0_based, binary_problem=binary_problem
        )
        # raises ModelDimensionMismatchError up front on a binary/multilabel mix-up
        self.scorer = BoostScorerEngine(
            model, binary_problem=binary_problem, strict=strict_dimensions
        )
        self.keep_results = keep_results

    @property
    def label_count(self) -> int:
        return self.scorer.model.label_count

    def __call__(self, partition: Partition) -> PartitionResult:
        table = ContingencyTable(self.label_count)
        results = []
        docs = self.parser.process_stream(partition.records)
        for result in self.scorer.process_stream(docs):
            table.add(result)
            if self.keep_results:
                results.append(result)
        return PartitionResult(partition_id=partition.partition_id, table=table, results=results)
