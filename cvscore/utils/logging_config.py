"""
Logging setup for the CV Scoring API.

Everything logs under the ``cvscore`` namespace. ``configure_for_environment``
picks a profile from ``ENVIRONMENT``: development and production also write a
rotating file under ``LOG_DIR``, testing logs warnings to the console only.
"""
import functools
import inspect
import logging
import logging.config
import os
import time
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-34s | %(message)s",
}

# environment -> (level, write log file, format)
PROFILES = {
    "production": (None, True, "detailed"),
    "development": ("DEBUG", True, "detailed"),
    "testing": ("WARNING", False, "simple"),
}


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None, style: str = "detailed") -> None:
    """Configure the root logger with a console handler and, when ``log_dir`` is given, a rotating file"""
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": style,
            "stream": "ext://sys.stdout",
        }
    }
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "detailed",
            "filename": str(log_dir / f"cvscore_{date.today():%Y%m%d}.log"),
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in FORMATS.items()
        },
        "handlers": handlers,
        "root": {"level": level, "handlers": list(handlers)},
        "loggers": {
            "uvicorn": {"level": "INFO", "handlers": list(handlers), "propagate": False},
            # one line per upstream connection otherwise
            "urllib3": {"level": "WARNING"},
        },
    })
    get_logger("logging").debug(f"Logging configured at {level} ({', '.join(handlers)})")


def configure_for_environment(environment: Optional[str] = None) -> None:
    environment = (environment or os.getenv("ENVIRONMENT", "development")).lower()
    default_level = os.getenv("LOG_LEVEL", "INFO").upper()
    level, to_file, style = PROFILES.get(environment, (None, False, "detailed"))
    log_dir = Path(os.getenv("LOG_DIR", "logs")) if to_file else None
    setup_logging(level=level or default_level, log_dir=log_dir, style=style)


def get_logger(name: str) -> logging.Logger:
    if name.startswith("cvscore"):
        return logging.getLogger(name)
    return logging.getLogger(f"cvscore.{name}")


class PerformanceMonitor:
    """Times a block and logs it, at WARNING once ``threshold_ms`` is exceeded"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.elapsed_ms = None
        self._start = None

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.0f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.0f}ms (threshold {self.threshold_ms:.0f}ms)")
        else:
            self.logger.info(f"{self.operation_name} took {self.elapsed_ms:.0f}ms")
        return False


def log_function_call(func):
    """Log entry and duration of a blocking pipeline function at DEBUG"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        logger.debug(f"Entering {func.__name__}")
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug(f"Left {func.__name__} after {time.perf_counter() - start:.3f}s")

    return wrapper


def log_api_call(operation: str):
    """Wrap an async route handler so its outcome and duration are logged"""

    def decorator(func):
        if not inspect.iscoroutinefunction(func):
            raise TypeError("log_api_call only wraps async endpoints")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(f"api.{func.__module__}")
            with PerformanceMonitor(f"API {operation}", logger, threshold_ms=10000):
                return await func(*args, **kwargs)

        return wrapper
    return decorator
