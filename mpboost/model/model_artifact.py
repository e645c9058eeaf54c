# mpboost/model/model_artifact.py
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import joblib

from mpboost import logs
from mpboost.model.boost_model import BoostModel, ModelKind, WeakHypothesis
from mpboost.utils.errors import ModelLoadError

ARTIFACT_FORMAT_VERSION = 1

META_FILE = "artifact.json"
MODEL_FILE = "model.joblib"
HYPOTHESES_FILE = "hypotheses.json"


# ============================================================
# Model Artifact (FROZEN)
# ============================================================
@dataclass(frozen=True)
class ModelArtifact:
    """
    ModelArtifact (FINAL / FROZEN)

    Semantics:
    - path always points to an artifact ROOT directory
    - artifact.json carries the model header; the ensemble itself lives in
      model.joblib (pickled BoostModel) or hypotheses.json (plain list)
    """
    path: Path
    kind: ModelKind
    label_count: int
    feature_count: int
    name: str = "mpboost"
    created_at: datetime | None = None
    format_version: int = ARTIFACT_FORMAT_VERSION


# ============================================================
# Resolve
# ============================================================
def resolve_model_artifact(artifact_dir: Path | str) -> ModelArtifact:
    artifact_dir = Path(artifact_dir)
    meta_path = artifact_dir / META_FILE
    if not meta_path.exists():
        raise ModelLoadError(
            f"[ModelArtifact] {META_FILE} not found in {artifact_dir}", path=artifact_dir
        )

    try:
        meta = json.loads(meta_path.read_text(encoding="utf-8"))
        version = int(meta.get("format_version", ARTIFACT_FORMAT_VERSION))
        artifact = ModelArtifact(
            path=artifact_dir,
            kind=ModelKind(meta["kind"]),
            label_count=int(meta["label_count"]),
            feature_count=int(meta["feature_count"]),
            name=meta.get("name", "mpboost"),
            created_at=(
                datetime.fromisoformat(meta["created_at"]) if meta.get("created_at") else None
            ),
            format_version=version,
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ModelLoadError(
            f"[ModelArtifact] invalid {META_FILE} in {artifact_dir}: {e}", path=artifact_dir
        ) from e

    if artifact.format_version > ARTIFACT_FORMAT_VERSION:
        raise ModelLoadError(
            f"[ModelArtifact] unsupported format_version={artifact.format_version} "
            f"(max {ARTIFACT_FORMAT_VERSION})",
            path=artifact_dir,
        )
    return artifact


# ============================================================
# Load
# ============================================================
def load_model(artifact_dir: Path | str) -> BoostModel:
    """
    Load a BoostModel from an artifact directory.

    Any failure is raised as ModelLoadError; callers treat it as fatal.
    """
    artifact = resolve_model_artifact(artifact_dir)
    root = artifact.path

    model_path = root / MODEL_FILE
    hyp_path = root / HYPOTHESES_FILE

    if model_path.exists():
        try:
            model = joblib.load(model_path)
        except Exception as e:
            raise ModelLoadError(f"[ModelArtifact] cannot unpickle {model_path}: {e}", path=root) from e
        if not isinstance(model, BoostModel):
            raise ModelLoadError(
                f"[ModelArtifact] {model_path} holds {type(model).__name__}, expected BoostModel",
                path=root,
            )
    elif hyp_path.exists():
        model = _model_from_json(artifact, hyp_path)
    else:
        raise ModelLoadError(
            f"[ModelArtifact] neither {MODEL_FILE} nor {HYPOTHESES_FILE} in {root}", path=root
        )

    if (model.kind, model.label_count, model.feature_count) != (
            artifact.kind, artifact.label_count, artifact.feature_count
    ):
        raise ModelLoadError(
            f"[ModelArtifact] header/model mismatch in {root}: "
            f"header=({artifact.kind.value}, {artifact.label_count}, {artifact.feature_count}) "
            f"model=({model.kind.value}, {model.label_count}, {model.feature_count})",
            path=root,
        )

    logs.info(
        f"[ModelArtifact] loaded {artifact.name} kind={model.kind.value} "
        f"labels={model.label_count} features={model.feature_count} "
        f"hypotheses={len(model.hypotheses)}"
    )
    return model


def _model_from_json(artifact: ModelArtifact, hyp_path: Path) -> BoostModel:
    try:
        rows: list[dict[str, Any]] = json.loads(hyp_path.read_text(encoding="utf-8"))
        hypotheses = [
            WeakHypothesis(
                feature_index=int(r["feature_index"]),
                threshold=float(r["threshold"]),
                polarity=int(r["polarity"]),
                weight=float(r["weight"]),
                label=int(r["label"]),
            )
            for r in rows
        ]
        return BoostModel.from_hypotheses(
            hypotheses,
            label_count=artifact.label_count,
            feature_count=artifact.feature_count,
            kind=artifact.kind,
            name=artifact.name,
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ModelLoadError(
            f"[ModelArtifact] invalid {hyp_path.name}: {e}", path=artifact.path
        ) from e


# ============================================================
# Save
# ============================================================
def save_model_artifact(model: BoostModel, artifact_dir: Path | str) -> ModelArtifact:
    """
    Persist a BoostModel as artifact.json + model.joblib.
    """
    artifact_dir = Path(artifact_dir)
    artifact_dir.mkdir(parents=True, exist_ok=True)

    joblib.dump(model, artifact_dir / MODEL_FILE)

    created_at = datetime.now(timezone.utc)
    meta = {
        "format_version": ARTIFACT_FORMAT_VERSION,
        "name": model.name,
        "kind": model.kind.value,
        "label_count": model.label_count,
        "feature_count": model.feature_count,
        "created_at": created_at.isoformat(),
    }
    (artifact_dir / META_FILE).write_text(json.dumps(meta, indent=2), encoding="utf-8")

    return ModelArtifact(
        path=artifact_dir,
        kind=model.kind,
        label_count=model.label_count,
        feature_count=model.feature_count,
        name=model.name,
        created_at=created_at,
    )
