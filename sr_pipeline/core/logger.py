#!/usr/bin/env python3
"""
Unified Logging System for the SR Pipeline
Follows FAIL LOUD philosophy - all errors are verbose and visible
"""

import sys
import logging
import logging.handlers
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config_manager import get_config
from .exceptions import ConfigurationError, LoggingError

DEFAULT_LOGGER_NAME = "SR-Pipeline"

# Used when settings.yaml cannot be loaded
DEFAULT_LOG_CONFIG = {
    'level': 'INFO',
    'format': '[{timestamp}] [{model}] {message}',
    'console': {'enabled': True, 'color': True},
}

class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output"""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        """Format log record with colors if enabled"""
        log_message = super().format(record)

        if getattr(record, 'color', False):
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            return f"{color}{log_message}{self.COLORS['RESET']}"

        return log_message

class SRLogger:
    """Unified logger for the SR Pipeline"""

    def __init__(self, name: str = DEFAULT_LOGGER_NAME, model: Optional[str] = None):
        """Initialize logger

        Args:
            name: Logger name
            model: Component or model in use (shown in every line)
        """
        self.name = name
        self.model = model or "SYSTEM"
        self.logger = logging.getLogger(name)

        # Only set up if not already configured
        if not self.logger.handlers:
            self._setup_logger()

    def _load_log_config(self) -> Tuple[Dict[str, Any], Optional[ConfigurationError]]:
        """logging: section of settings.yaml, or defaults when it cannot be loaded"""
        try:
            return get_config().settings.get('logging', {}), None
        except ConfigurationError as e:
            return dict(DEFAULT_LOG_CONFIG), e

    def _setup_logger(self):
        """Attach console and file handlers described by the logging settings"""
        log_config, config_error = self._load_log_config()

        level_str = str(log_config.get('level', 'INFO')).upper()
        self.logger.setLevel(getattr(logging, level_str, logging.INFO))
        format_str = self._get_format_string(
            log_config.get('format', DEFAULT_LOG_CONFIG['format'])
        )

        console_config = log_config.get('console', {})
        if console_config.get('enabled', True):
            self.logger.addHandler(self._console_handler(format_str, console_config.get('color', True)))

        file_config = log_config.get('file', {})
        if file_config.get('enabled', False):
            self.logger.addHandler(self._file_handler(format_str, file_config))

        if config_error is not None:
            self.warning(
                f"Logging settings unavailable, using defaults: "
                f"{config_error.message.splitlines()[0]}"
            )

    def _console_handler(self, format_str: str, color: bool) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColoredFormatter(format_str))
        if color:
            handler.addFilter(lambda record: setattr(record, 'color', True) or True)
        return handler

    def _file_handler(self, format_str: str, file_config: Dict[str, Any]) -> logging.Handler:
        """Rotating file handler; the directory is created on demand"""
        log_path = Path(
            file_config.get('path', 'logs/{date}.log').format(date=datetime.now().strftime('%Y-%m-%d'))
        ).expanduser()
        max_size_mb = file_config.get('max_size_mb', 50)
        backup_count = file_config.get('backup_count', 5)

        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=max_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            raise LoggingError(
                "Failed to set up file logging",
                f"{str(e)}\nTraceback: {traceback.format_exc()}",
                f"Check write permissions for log directory: {log_path.parent}"
            )

        handler.setFormatter(logging.Formatter(format_str))
        return handler

    def _get_format_string(self, template: str) -> str:
        """Convert template format to Python logging format"""
        format_str = template
        format_str = format_str.replace('{timestamp}', '%(asctime)s')
        format_str = format_str.replace('{model}', '%(model)s')
        format_str = format_str.replace('{message}', '%(message)s')
        format_str = format_str.replace('{level}', '%(levelname)s')
        return format_str

    def _log(self, level: int, message: str, **kwargs):
        """Internal log method with model context"""
        extra = {'model': self.model}
        extra.update(kwargs.pop('extra', {}))

        self.logger.log(level, message, extra=extra, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log error message - always verbose with full traceback

        Args:
            message: Error message
            exception: Optional exception object for additional context
        """
        error_msg = f"ERROR: {message}"

        if exception:
            error_msg += f"\nException Type: {type(exception).__name__}"
            error_msg += f"\nException Message: {str(exception)}"
            error_msg += f"\nTraceback:\n{traceback.format_exc()}"

        self._log(logging.ERROR, error_msg, **kwargs)

    def log_stage(self, stage: str, message: str = ""):
        """Log a pipeline stage transition

        Args:
            stage: Stage name
            message: Optional message
        """
        stage_msg = f">>> Stage: {stage}"
        if message:
            stage_msg += f" - {message}"
        self.info(stage_msg)

# Global logger instance
_logger: Optional[SRLogger] = None

def get_logger(name: Optional[str] = None, model: Optional[str] = None) -> SRLogger:
    """Get logger instance

    Args:
        name: Logger name (uses default if None)
        model: Component context; returns a dedicated wrapper so the
            global context is left untouched

    Returns:
        Logger instance
    """
    global _logger

    if name is not None:
        return SRLogger(name, model)
    if model is not None:
        return SRLogger(DEFAULT_LOGGER_NAME, model)
    if _logger is None:
        _logger = SRLogger(DEFAULT_LOGGER_NAME)
    return _logger

