"""
Centralized logging configuration.

Every module logs through ``logging.getLogger(__name__)``; this module
installs the handlers once for the whole process.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LoggerSetup:
    """Configures console (and optionally rotating file) logging."""

    _initialized = False
    _handlers: List[logging.Handler] = []

    @classmethod
    def setup(cls,
              level: Union[int, str] = logging.INFO,
              log_file: Optional[str] = None,
              max_bytes: int = 10 * 1024 * 1024,
              backup_count: int = 5) -> logging.Logger:
        """
        Initialize and return the root logger.
        Handlers are installed once; later calls only adjust the level.
        """
        root = logging.getLogger()
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        root.setLevel(level)

        if cls._initialized:
            for handler in cls._handlers:
                handler.setLevel(level)
            return root

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        handlers = [console_handler]

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            handlers.append(file_handler)

        cls._handlers = handlers
        cls._initialized = True
        return root

    @classmethod
    def reset(cls) -> None:
        """Remove the handlers installed by setup()."""
        root = logging.getLogger()
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []
        cls._initialized = False


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    return LoggerSetup.setup(level=level, log_file=log_file)
