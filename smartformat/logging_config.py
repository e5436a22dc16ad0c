"""
Unified Logging Configuration for SmartFormat

This module provides a centralized logging system that combines:
- Standard Python logging under the 'SmartFormat' logger
- File output to debug_flow.txt (DEBUG_MODE only)
- Performance timing via Timer context manager

All modules should import logging functions from this module:
    from smartformat.logging_config import debug_log, info, warning, error, Timer

The module respects DEBUG_MODE from config:
- DEBUG_MODE=True: All messages shown on console and traced to file, verbose timing
- DEBUG_MODE=False: Only warnings/errors reach the logger's handlers

Log Levels:
- debug_log(): Trace file and console only in DEBUG_MODE
- info(): Standard information messages
- warning(): Warning messages (always emitted)
- error(): Error messages with optional exception info
"""

import logging
import sys
import time
from datetime import datetime

from smartformat.config import DEBUG_LOG_FILE, DEBUG_MODE, LOG_DATE_FORMAT, LOG_FORMAT

# =============================================================================
# File Logger Setup (debug_flow.txt for debugging sessions)
# =============================================================================

class _DebugFileLogger:
    """
    Manages the debug_flow.txt file for detailed debugging output.

    The file is opened lazily on the first write, and only when DEBUG_MODE is
    on, so importing the formatter as a library never touches the filesystem.
    """

    _instance = None
    _log_file = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def _initialize_log_file(cls):
        """Create and initialize the debug log file."""
        cls._log_file = open(DEBUG_LOG_FILE, 'w', encoding='utf-8')
        cls._log_file.write("=== SmartFormat Debug Log ===\n")
        cls._log_file.write(f"Started: {datetime.now().isoformat()}\n")
        cls._log_file.write("=" * 60 + "\n\n")
        cls._log_file.flush()

    def write(self, message: str):
        """Write message to the debug log file (DEBUG_MODE only)."""
        if not DEBUG_MODE:
            return
        if self._log_file is None:
            try:
                self._initialize_log_file()
            except OSError:
                return
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self._log_file.write(f"[{timestamp}] {message}\n")
        self._log_file.flush()

    def close(self):
        """Close the debug log file gracefully."""
        if self._log_file:
            self._log_file.write(f"\n{'=' * 60}\n")
            self._log_file.write(f"Ended: {datetime.now().isoformat()}\n")
            self._log_file.close()
            _DebugFileLogger._log_file = None


# Global debug file logger instance
_debug_file_logger = _DebugFileLogger()


# =============================================================================
# Standard Python Logging Setup
# =============================================================================

def _setup_standard_logging() -> logging.Logger:
    """
    Configure the standard Python logging framework.

    Returns:
        Configured logger instance for SmartFormat
    """
    logger = logging.getLogger('SmartFormat')
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    # Console handler only in DEBUG_MODE; otherwise the host application's
    # logging configuration decides where records go.
    if DEBUG_MODE:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(console_handler)
    else:
        logger.addHandler(logging.NullHandler())

    return logger


# Global standard logger instance
_logger = _setup_standard_logging()


# =============================================================================
# Timer Context Manager
# =============================================================================

class Timer:
    """
    Context manager for timing code blocks with automatic logging.

    Usage:
        with Timer("Pipeline pass 1"):
            # code to time
            pass

    Output (DEBUG_MODE=True):
        [14:32:01.120] Starting Pipeline pass 1...
        [14:32:01.128] Pipeline pass 1 took 8 ms

    Attributes:
        operation_name: Name of the operation being timed
        duration_ms: Duration in milliseconds (available after exit)
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        """
        Initialize the timer.

        Args:
            operation_name: Descriptive name for the operation
            auto_log: If True, automatically log start/end
        """
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float | None = None
        self.end_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        if self.auto_log:
            debug_log(f"Starting {self.operation_name}...")
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        self.duration_ms = (self.end_time - self.start_time) * 1000

        if self.auto_log:
            if self.duration_ms < 1000:
                duration_str = f"{self.duration_ms:.0f} ms"
            else:
                duration_str = f"{self.duration_ms / 1000:.1f} seconds"

            debug_log(f"{self.operation_name} took {duration_str}")

        return False  # Don't suppress exceptions


# =============================================================================
# Public Logging Functions
# =============================================================================

def debug_log(message: str):
    """
    Log a debug message to the trace file and the 'SmartFormat' logger.

    Args:
        message: The message to log (prefix with [MODULE] for clarity)

    Example:
        debug_log("[STAGES] Structural Detection: 2 stages applied")
    """
    _debug_file_logger.write(message)
    _logger.debug(message)


def info(message: str):
    """Log an informational message."""
    _debug_file_logger.write(f"[INFO] {message}")
    _logger.info(message)


def warning(message: str):
    """Log a warning message."""
    _debug_file_logger.write(f"[WARNING] {message}")
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only in DEBUG_MODE)
    """
    _debug_file_logger.write(f"[ERROR] {message}")
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def close_debug_log():
    """
    Close the debug log file gracefully.

    Call this at application shutdown to ensure all logs are flushed.
    """
    _debug_file_logger.close()


__all__ = [
    'debug_log',
    'info',
    'warning',
    'error',
    'close_debug_log',
    'Timer',
    'DEBUG_MODE',
]
