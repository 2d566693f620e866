#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging configuration for hostsweep.

Every run writes its own append-only log file named after the start time.
"""

from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger("hostsweep")


def run_log_path(log_dir: str, started: Optional[datetime] = None) -> Path:
    """Return the log file path for a run started at ``started``."""
    started = started or datetime.now()
    return Path(log_dir) / f"cleanup-{started.strftime('%Y%m%d-%H%M%S')}.log"


def setup_logging(verbose: bool = False, log_dir: Optional[str] = None) -> Optional[Path]:
    """
    Configure logging system.

    Args:
        verbose: If True, show DEBUG messages on the console.
        log_dir: Directory for the per-run log file. If None, only console logging.

    Returns:
        Path of the run log, or None if no file could be opened.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers = []

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handlers.append(console_handler)

    # File handler (optional)
    log_path = None
    file_error = None
    if log_dir:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            log_path = run_log_path(log_dir)
            file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
            ))
            file_handler.setLevel(level)
            handlers.append(file_handler)
        except OSError as e:
            log_path = None
            file_error = e

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    logger.setLevel(level)

    if file_error is not None:
        logger.warning(f"Failed to create run log in {log_dir}: {file_error}")
    elif log_path is not None:
        logger.info(f"Logging to file: {log_path}")

    if verbose:
        logger.debug("Verbose logging enabled")

    return log_path
