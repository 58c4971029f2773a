"""Logging configuration: loguru setup and standard logging interception."""

import logging
import sys
from pathlib import Path

from loguru import logger

from atlas.config import Settings, get_settings


class InterceptHandler(logging.Handler):
    """Route standard library logging to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller frame (skip logging internals)
        frame, depth = sys._getframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure loguru with a stderr sink (plus an optional JSON file), intercept standard logging.

    Library code only emits records; applications embedding the converter call this once.
    """
    level = level.upper()
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{message}",
            level=level,
            serialize=True,
            rotation="100 MB",
            retention=10,
            compression="gz",
        )

    # Intercept standard logging → loguru (markdown-it logs through it)
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logging from `ATLAS_LOG_LEVEL` / `ATLAS_LOG_FILE`."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_file)
