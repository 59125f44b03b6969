# ┌───────────────────────────────────────────────────────────────┐
# │  Copyright (c) 2025 Ateet Vatan Bahmani                      │
# │  Project: MASX AI – Listing Extraction Pipeline              │
# │  All rights reserved.                                        │
# └───────────────────────────────────────────────────────────────┘
#
# MASX AI is a proprietary software system developed and owned by Ateet Vatan Bahmani.
# The source code, documentation, workflows, designs, and naming (including "MASX AI")
# are protected by applicable copyright and trademark laws.
#
# Redistribution, modification, commercial use, or publication of any portion of this
# project without explicit written consent is strictly prohibited.
#
# This project is not open-source and is intended solely for internal, research,
# or demonstration use by the author.
#
# Contact: ab@masxai.com | MASXAI.com

"""
Logging configuration.
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional

import structlog
from structlog.stdlib import LoggerFactory

from listing_pipeline.core.exceptions import ConfigurationException

from .settings import get_settings


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    logging for the listing pipeline.
    log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file: Path to log file
    log_format: Log format ('json' or 'text')

    This function sets up:
    Structured logging with JSON output
    **Log rotation and retention
    **Console and file handlers
    """
    settings = get_settings()

    log_level = log_level or settings.log_level
    log_file = log_file or settings.log_file
    log_format = log_format or settings.log_format

    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ConfigurationException(
            f"Unknown log level: {log_level}", context={"log_level": log_level}
        )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = create_rotating_file_handler(
            log_file, settings.log_rotation, settings.log_retention
        )
        root_logger.addHandler(file_handler)

    configure_third_party_loggers(log_level)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging configured",
        log_level=log_level,
        log_file=log_file,
        log_format=log_format,
        environment=settings.environment,
    )


def create_rotating_file_handler(
    log_file: str, rotation: str, retention: int
) -> logging.handlers.RotatingFileHandler:
    """
    Create a rotating file handler for log files.
    log_file: Path to the log file
    rotation: Rotation policy ('daily', 'weekly', 'monthly')
    retention: Number of backup files to keep

    Returns:  Configured rotating file handler
    """
    if rotation == "daily":
        max_bytes = 10 * 1024 * 1024  # 10MB
        backup_count = retention
    elif rotation == "weekly":
        max_bytes = 50 * 1024 * 1024  # 50MB
        backup_count = retention
    elif rotation == "monthly":
        max_bytes = 100 * 1024 * 1024  # 100MB
        backup_count = retention
    else:
        max_bytes = 10 * 1024 * 1024
        backup_count = 30

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    return handler


def configure_third_party_loggers(log_level: str) -> None:
    """
    Configure logging levels for third-party libraries.
    Args: log_level: Base logging level for the application
    """
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    if get_settings().is_development:
        logging.getLogger("listing_pipeline").setLevel(logging.DEBUG)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.
    name: Logger name (usually __name__)
    Returns: Configured structured logger
    """
    return structlog.get_logger(name)


def log_pipeline_step(
    logger: structlog.stdlib.BoundLogger,
    step_name: str,
    url: str,
    status: str = "success",
    duration: Optional[float] = None,
    details: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
) -> None:
    """
    Log a single pipeline step for one listing URL.
    logger: Structured logger instance
    step_name: Name of the step ('resolve', 'fetch', 'extract', 'validate')
    url: Listing URL the step ran for
    status: 'success', 'failure' or 'warning'
    duration: Execution duration in seconds
    details: Additional step output worth keeping
    error: Error message if the step failed
    """
    log_data = {
        "step_name": step_name,
        "url": url,
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if duration is not None:
        log_data["duration_seconds"] = round(duration, 4)

    if details:
        log_data["details"] = details

    if error:
        log_data["error"] = error
        log_data["status"] = "failure"

    if log_data["status"] == "failure":
        logger.error("Pipeline step failed", **log_data)
    elif log_data["status"] == "warning":
        logger.warning("Pipeline step warning", **log_data)
    else:
        logger.info("Pipeline step executed", **log_data)


def get_service_logger(service_name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger for a service module.
    service_name: Name of the service (e.g., 'ListingFetcher')
    Returns: Configured structured logger
    """
    return structlog.get_logger(f"service.{service_name}")


def get_api_logger(api_name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger for a api module.
    api_name: Name of the api (e.g., 'api')
    Returns: Configured structured logger
    """
    return structlog.get_logger(f"api.{api_name}")
