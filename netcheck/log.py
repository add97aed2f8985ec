# netcheck/log.py
import json
import logging
import os
import time
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def create_logger(name: str = "netcheck",
                  log_file: Optional[str] = None,
                  level: int = logging.INFO) -> logging.Logger:
    """
    Build the logger for one invocation. Callers pass the returned logger
    to the components that need it and call close_logger() when done.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Prevent duplicate handlers if created twice in one process
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    sh = logging.StreamHandler()  # stderr, keeps stdout for PASS/FAIL lines
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    if log_file:
        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


def close_logger(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime())


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    payload = {"ts": now_iso(), "event": event, **fields}
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
