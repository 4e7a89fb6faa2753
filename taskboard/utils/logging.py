"""Structured logging configuration for the task board."""

import logging
import logging.handlers
import sys
import time

from ..config import Settings

# Handlers installed by setup_logging; handlers attached by others are left alone
_installed_handlers = []


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors for console output."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # File handlers share the record
            record.levelname = levelname


def setup_logging(settings: Settings) -> None:
    """Setup logging for the application.

    Args:
        settings: Application settings containing logging configuration
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.log_file else level)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        file_handler = logging.handlers.RotatingFileHandler(
            filename=settings.log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=settings.log_file.with_suffix(".error.log"),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        root_logger.addHandler(error_handler)
        _installed_handlers.append(error_handler)

    configure_module_loggers(settings)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {settings.log_level.upper()}")
    if settings.log_file:
        logger.info(f"Log files will be written to: {settings.log_file.absolute()}")


def configure_module_loggers(settings: Settings) -> None:
    """Configure logging levels for specific modules.

    Args:
        settings: Application settings
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.getLogger('taskboard').setLevel(level)

    # Request lines come from our own middleware
    third_party_loggers = {
        'uvicorn': logging.INFO,
        'uvicorn.access': logging.WARNING,
        'fastapi': logging.INFO,
        'httpx': logging.WARNING,
    }

    for logger_name, third_party_level in third_party_loggers.items():
        logging.getLogger(logger_name).setLevel(third_party_level)


def configure_request_logging():
    """Build the request/response logging middleware."""
    from fastapi import Request

    async def log_requests(request: Request, call_next):
        """Log one line per request: method, path, status and duration."""
        logger = logging.getLogger("taskboard.requests")

        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{elapsed_ms:.1f} ms"
        )

        return response

    return log_requests


def log_startup_info(settings: Settings):
    """Log application startup information.

    Args:
        settings: Application settings
    """
    logger = logging.getLogger("taskboard.startup")

    logger.info("=" * 60)
    logger.info("Task Board Starting")
    logger.info("=" * 60)
    logger.info(f"Listening on: http://{settings.host}:{settings.port}")
    logger.info(f"CORS origin allowed: {settings.origin}")
    logger.info(f"Data file: {settings.data_file}")
    logger.info(f"Static directory: {settings.static_dir}")
    logger.info(f"Log Level: {settings.log_level.upper()}")
    logger.info("=" * 60)


def log_shutdown_info():
    """Log application shutdown information."""
    logger = logging.getLogger("taskboard.shutdown")

    logger.info("=" * 60)
    logger.info("Task Board Shutting Down")
    logger.info("=" * 60)


class TimedOperation:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str, logger_name: str = __name__):
        """Initialize timed operation.

        Args:
            operation_name: Name of the operation
            logger_name: Logger name to use
        """
        self.operation_name = operation_name
        self.logger = logging.getLogger(logger_name)
        self.start_time = None

    def __enter__(self):
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End timing and log result."""
        duration = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.debug(f"Operation completed: {self.operation_name} in {duration:.3f}s")
        else:
            self.logger.error(f"Operation failed: {self.operation_name} after {duration:.3f}s")


__all__ = [
    'setup_logging',
    'configure_request_logging',
    'log_startup_info',
    'log_shutdown_info',
    'TimedOperation',
]
