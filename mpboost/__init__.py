#!filepath: mpboost/__init__.py
"""mpboost

Partitioned inference for pre-trained MP-Boost multi-label classifiers
over LibSVM datasets, with contingency-table effectiveness reports.
"""

from .utils.logger import Logging, logs, init_logging
from .utils.retry import Retry
from .utils.filesystem import FileSystem
from .config.app_config import AppConfig

__version__ = "0.3.0"

__all__ = [
    "logs", "Logging", "init_logging",
    "Retry",
    "FileSystem",
    "AppConfig",
    "__version__",
]
