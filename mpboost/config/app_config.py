#!filepath: mpboost/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from .log_config import LogConfig
from .classify_config import ClassifyConfig


def package_root() -> str:
    """
    mpboost/config/app_config.py -> mpboost/config -> mpboost
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


# env var -> classify field
_ENV_OVERRIDES = {
    "MPBOOST_PARALLELISM": "parallelism_degree",
    "MPBOOST_BATCH_SIZE": "batch_size",
}


class AppConfig(BaseModel):
    log: LogConfig = LogConfig()
    classify: ClassifyConfig = ClassifyConfig()

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config + .env
        - default: mpboost/config/base.yml
        - env vars override the YAML values
        """
        load_dotenv(os.path.join(os.getcwd(), ".env"))

        if path is None:
            path = os.path.join(package_root(), "config", "base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        classify = dict(raw.get("classify") or {})
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                classify[field_name] = int(value)
        raw["classify"] = classify

        return cls(**raw)
