#!filepath: mpboost/utils/logger.py
import os
import sys
from loguru import logger
from typing import Optional

# pid: partitions are classified in worker processes
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | pid={process} | {message}"


class Logging:
    """
    Process-wide logging wrapper around loguru.
    ---------------------------------------
    - stderr sink always on
    - optional rotating file sink (per day)
    - retention period for file logs
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level

        self._configure()

    def _configure(self) -> None:
        """
        Reset loguru sinks (at import time and again from init_logging).
        """

        logger.remove()
        logger.add(sink=sys.stderr, level=self.level, format=LOG_FORMAT)

        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            logger.add(
                sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
                rotation=self.rotation,
                retention=self.retention,
                level=self.level,
                format=LOG_FORMAT,
                enqueue=True,  # worker processes share the file sink
                backtrace=True,
                diagnose=True,
            )

    # ----------- log methods -----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    def log(self, level: str, msg: str, *args, **kwargs):
        logger.log(level, msg, *args, **kwargs)


# default global logs (replaced by init_logging)
logs = Logging()


def init_logging(cfg) -> Logging:
    """
    Re-configure the global sinks from a LogConfig.
    """
    logs.log_dir = cfg.dir
    logs.rotation = cfg.rotation
    logs.retention = cfg.retention
    logs.level = cfg.level
    logs._configure()
    return logs
