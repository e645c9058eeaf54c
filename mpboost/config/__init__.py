from .app_config import AppConfig
from .classify_config import ClassifyConfig
from .log_config import LogConfig

__all__ = ["AppConfig", "ClassifyConfig", "LogConfig"]
