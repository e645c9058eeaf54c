#!filepath: mpboost/pipeline/context.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from mpboost.config.classify_config import ClassifyConfig
from mpboost.engines.libsvm_parser_engine import Record
from mpboost.evaluation.aggregator import ClassificationResults, PartitionResult
from mpboost.evaluation.contingency import ContingencyTable
from mpboost.model.boost_model import BoostModel
from mpboost.pipeline.parallel.partition import PartitionClassifier


def resolve_parallelism(cfg: ClassifyConfig) -> int:
    """configured degree, else the number of available cores"""
    if cfg.parallelism_degree is not None:
        return cfg.parallelism_degree
    return os.cpu_count() or 1


@dataclass
class ClassifyContext:
    """
    ClassifyContext = the only carrier between steps of one job.

    - the workflow builds it
    - steps read / fill slots, no business logic here
    """

    # -------------------------
    # identity / bindings
    # -------------------------
    job: str
    input_path: Path
    model: BoostModel
    cfg: ClassifyConfig
    handler: PartitionClassifier
    output_path: Optional[Path] = None
    label_metrics_path: Optional[Path] = None

    # -------------------------
    # data layer
    # -------------------------
    records: Optional[List[Record]] = None
    partition_results: List[PartitionResult] = field(default_factory=list)

    # -------------------------
    # result layer
    # -------------------------
    results: Optional[ClassificationResults] = None
    table: Optional[ContingencyTable] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def parallelism(self) -> int:
        return resolve_parallelism(self.cfg)
