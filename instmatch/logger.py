"""
Structured logging for instmatch.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for monitoring match quality across batch runs.
"""

import json
import logging
import os
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks comparison and acceptance metrics for matching runs.
    """

    def __init__(
        self,
        name: str = "instmatch",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        # Batch runs update metrics from worker threads
        self._lock = threading.Lock()
        self.metrics = {
            "comparisons": 0,
            "matches": 0,
            "no_matches": 0,
            "targets_resolved": 0,
            "rejections_by_reason": {},
            "mode_counts": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"instmatch_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if not self.logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} | Context: {json.dumps(context, ensure_ascii=False, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_comparison(self, mode: Optional[str], rejection: Optional[str]):
        """Record one scored pair. rejection is None for an accepted match."""
        with self._lock:
            self.metrics["comparisons"] += 1
            if rejection is None:
                self.metrics["matches"] += 1
            else:
                self.metrics["no_matches"] += 1
                reasons = self.metrics["rejections_by_reason"]
                reasons[rejection] = reasons.get(rejection, 0) + 1
            if mode is not None:
                modes = self.metrics["mode_counts"]
                modes[mode] = modes.get(mode, 0) + 1

    def record_target_resolved(self):
        """Record one target whose candidate selection finished."""
        with self._lock:
            self.metrics["targets_resolved"] += 1

    def get_metrics(self) -> dict:
        """Return a snapshot of current metrics with the match rate."""
        with self._lock:
            metrics_copy = {
                k: (dict(v) if isinstance(v, dict) else v)
                for k, v in self.metrics.items()
            }

        metrics_copy["match_rate"] = 0.0
        if metrics_copy["comparisons"] > 0:
            metrics_copy["match_rate"] = round(
                metrics_copy["matches"] / metrics_copy["comparisons"], 3
            )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Matching Session Metrics ===")
        self.info(f"Targets resolved: {metrics['targets_resolved']}")
        self.info(
            f"Comparisons: {metrics['matches']}/{metrics['comparisons']} accepted "
            f"({metrics['match_rate'] * 100:.1f}%)"
        )

        if metrics["mode_counts"]:
            self.info("Weighting modes:")
            for mode, count in metrics["mode_counts"].items():
                self.info(f"  {mode}: {count}")

        if metrics["rejections_by_reason"]:
            self.info("Rejections:")
            for reason, count in metrics["rejections_by_reason"].items():
                self.info(f"  {reason}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "instmatch",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and file output default to INSTMATCH_LOG_LEVEL and
    INSTMATCH_LOG_DIR; file logging is off unless a directory is set.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            level = os.environ.get("INSTMATCH_LOG_LEVEL", "INFO")
        log_dir = os.environ.get("INSTMATCH_LOG_DIR")
        if log_dir and "log_dir" not in kwargs:
            kwargs["log_dir"] = Path(log_dir)
        kwargs.setdefault("enable_file", bool(log_dir))
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
