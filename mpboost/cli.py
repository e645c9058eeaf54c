#!filepath: mpboost/cli.py
from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import print

from mpboost import __version__, init_logging
from mpboost.config.app_config import AppConfig
from mpboost.config.classify_config import ClassifyConfig
from mpboost.model.model_artifact import load_model
from mpboost.utils.errors import MPBoostError, UserInputError
from mpboost.workflows.classify_libsvm import classify_libsvm, run_batch_classification

app = typer.Typer(help="MP-Boost LibSVM classifier")


@app.command()
def version():
    print(f"v{__version__}")


def _merge_config(base: ClassifyConfig, **overrides) -> ClassifyConfig:
    updates = {k: v for k, v in overrides.items() if v is not None}
    try:
        return ClassifyConfig(**{**base.model_dump(), **updates})
    except ValidationError as e:
        raise UserInputError(f"invalid options: {e.errors()[0]['loc'][0]}: {e.errors()[0]['msg']}") from e


@app.command()
def classify(
        input_file: Path = typer.Argument(..., help="dataset to classify, LibSVM format"),
        input_model: Path = typer.Argument(..., help="model artifact directory"),
        output_file: Path = typer.Argument(..., help="where to write the results"),
        binary_problem: bool = typer.Option(
            False, "--binary-problem", "-b",
            help="the input dataset contains a binary problem, not a multilabel one",
        ),
        labels_0_based: bool = typer.Option(
            False, "--labels-0-based", "-z",
            help="label ids are already in [0, numLabels-1]",
        ),
        enable_engine_logging: bool = typer.Option(
            False, "--enable-engine-logging", "-l", help="log executor diagnostics at INFO",
        ),
        parallelism_degree: Optional[int] = typer.Option(
            None, "--parallelism-degree", "-p",
            help="number of partitions / workers (default: available cores)",
        ),
        single_document_classification: bool = typer.Option(
            False, "--single-document-classification", "--sdc",
            help="stream results in batches to bound memory on big test sets",
        ),
        batch_size: Optional[int] = typer.Option(None, "--batch-size", help="streaming batch size"),
        permissive: bool = typer.Option(
            False, "--permissive", help="drop out-of-model features/labels instead of failing",
        ),
        sort_output: bool = typer.Option(False, "--sort-output", help="write results sorted by doc id"),
        label_metrics: Optional[Path] = typer.Option(
            None, "--label-metrics", help="also write per-label metrics as parquet",
        ),
        config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
):
    """
    Classify INPUT_FILE with the model in INPUT_MODEL and write results to OUTPUT_FILE.
    """
    start = time.perf_counter()
    try:
        app_cfg = AppConfig.load(str(config) if config else None)
        init_logging(app_cfg.log)

        base = app_cfg.classify
        cfg = _merge_config(
            base,
            binary_problem=binary_problem or base.binary_problem,
            labels_0_based=labels_0_based or base.labels_0_based,
            enable_engine_logging=enable_engine_logging or base.enable_engine_logging,
            parallelism_degree=parallelism_degree,
            batch_size=batch_size,
            strict_dimensions=False if permissive else None,
            sort_by_doc_id=sort_output or base.sort_by_doc_id,
        )

        model = load_model(input_model)

        if single_document_classification:
            classify_libsvm(
                input_file, model, output_file, cfg, label_metrics_path=label_metrics
            )
        else:
            run_batch_classification(
                input_file, model, output_file, cfg, label_metrics_path=label_metrics
            )
    except MPBoostError as e:
        print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(code=1)

    elapsed_ms = (time.perf_counter() - start) * 1000
    print(f"Execution time: {elapsed_ms:.0f} milliseconds.")


if __name__ == "__main__":
    app()

# python -m mpboost.cli classify data/test.svm models/mpboost out/results.txt -p 8
