# mpboost/config/classify_config.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ClassifyConfig(BaseModel):
    """
    ClassifyConfig (FROZEN)

    Options consumed by the classification core. Built once at startup
    and passed down; nothing below the workflow reads globals.
    """

    model_config = {"frozen": True}

    # dataset conventions
    binary_problem: bool = False
    labels_0_based: bool = False

    # execution
    parallelism_degree: Optional[int] = Field(default=None, ge=1)  # None -> cpu count
    batch_size: int = Field(default=100_000, ge=1)                # streaming only
    partition_max_attempts: int = Field(default=1, ge=1)

    # model space policy
    strict_dimensions: bool = True

    # report
    sort_by_doc_id: bool = False
    per_label_report: bool = False

    # engine diagnostics (executor / pipeline logs)
    enable_engine_logging: bool = False
