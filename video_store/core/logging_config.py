"""
Logging configuration for the Video Store service.

This module provides logging setup with rotation, colored console output,
and per-component log levels for the upload pipeline, thumbnail extraction
and the API server.
"""

import logging
import logging.handlers
import sys
import time
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

# (logger name, level at DEBUG, level otherwise)
COMPONENT_LEVELS = (
    ('video_store.video', logging.DEBUG, logging.INFO),
    ('video_store.storage', logging.DEBUG, logging.INFO),
    ('video_store.api', logging.DEBUG, logging.INFO),
    ('performance', logging.DEBUG, logging.INFO),
    # One access line per range request otherwise
    ('uvicorn.access', logging.INFO, logging.WARNING),
    ('uvicorn', logging.INFO, logging.INFO),
    ('fastapi', logging.INFO, logging.WARNING),
)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The record is shared with the file handler
            record.levelname = levelname


class VideoStoreLogger:
    """Root logger setup for the Video Store service"""

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 enable_console: bool = True, enable_rotation: bool = True,
                 max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        self.log_level = log_level.upper()
        self.log_file = log_file
        self.enable_console = enable_console
        self.enable_rotation = enable_rotation
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self._setup_logging()

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def _setup_logging(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        root_logger.handlers.clear()

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.level)
            console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
            root_logger.addHandler(console_handler)

        if self.log_file:
            file_handler = self._create_file_handler()
            if file_handler is not None:
                root_logger.addHandler(file_handler)

        self._setup_component_loggers()

        logging.getLogger(__name__).info(f"Logging initialized - Level: {self.log_level}, File: {self.log_file}")

    def _create_file_handler(self) -> Optional[logging.Handler]:
        try:
            Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)

            if self.enable_rotation:
                handler = logging.handlers.RotatingFileHandler(
                    self.log_file, maxBytes=self.max_bytes, backupCount=self.backup_count
                )
            else:
                handler = logging.FileHandler(self.log_file)
        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}")
            return None

        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler

    def _setup_component_loggers(self) -> None:
        """Setup specific log levels for different components"""
        debug = self.log_level == 'DEBUG'
        for name, debug_level, normal_level in COMPONENT_LEVELS:
            logging.getLogger(name).setLevel(debug_level if debug else normal_level)

    @staticmethod
    def setup_exception_logging():
        """Route uncaught exceptions through logging"""

        def handle_exception(exc_type, exc_value, exc_traceback):
            if issubclass(exc_type, KeyboardInterrupt):
                sys.__excepthook__(exc_type, exc_value, exc_traceback)
                return

            logging.getLogger("uncaught_exception").critical(
                "Uncaught exception",
                exc_info=(exc_type, exc_value, exc_traceback)
            )

        sys.excepthook = handle_exception


class PerformanceLogger:
    """Times named pipeline stages; several may run at once"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"performance.{name}")
        self._started: Dict[str, float] = {}

    def start_timer(self, operation: str) -> None:
        self._started[operation] = time.monotonic()
        self.logger.debug(f"Started: {operation}")

    def end_timer(self, operation: str) -> float:
        started = self._started.pop(operation, None)
        if started is None:
            self.logger.warning(f"Timer not started for: {operation}")
            return 0.0

        duration = time.monotonic() - started
        self.logger.info(f"Completed: {operation} in {duration:.3f}s")
        return duration


class ErrorTracker:
    """Track and log errors with context"""

    def __init__(self, component_name: str):
        self.component_name = component_name
        self.logger = logging.getLogger(f"errors.{component_name}")
        self.error_count = 0
        self.warning_count = 0
        self.errors_by_context: Counter = Counter()
        self.last_error_time: Optional[datetime] = None

    def log_error(self, error: Exception, context: str = "",
                  additional_data: Optional[dict] = None) -> None:
        """Log an error with context and tracking"""
        self.error_count += 1
        self.errors_by_context[context or "unknown"] += 1
        self.last_error_time = datetime.now()

        where = f" ({context})" if context else ""
        message = f"Error in {self.component_name}{where}: {error}"
        if additional_data:
            message += f" | Data: {additional_data}"

        self.logger.error(message, exc_info=error)

    def log_warning(self, message: str, context: str = "") -> None:
        self.warning_count += 1
        where = f" ({context})" if context else ""
        self.logger.warning(f"Warning in {self.component_name}{where}: {message}")

    def get_error_stats(self) -> dict:
        return {
            "component": self.component_name,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "errors_by_context": dict(self.errors_by_context),
            "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None
        }


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> VideoStoreLogger:
    """Setup logging for the entire application"""
    logger_setup = VideoStoreLogger(log_level=log_level, log_file=log_file)
    VideoStoreLogger.setup_exception_logging()
    return logger_setup


def get_performance_logger(component_name: str) -> PerformanceLogger:
    return PerformanceLogger(component_name)


def get_error_tracker(component_name: str) -> ErrorTracker:
    return ErrorTracker(component_name)
