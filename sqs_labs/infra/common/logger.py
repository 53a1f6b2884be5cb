"""Centralized logging configuration."""
import logging
import os
import sys
from typing import Optional


_logging_configured = False


def level_from_env(default: str = "INFO") -> int:
    """Resolve logging level from LOG_LEVEL (e.g. DEBUG, warning)."""
    name = os.getenv("LOG_LEVEL", default).upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.INFO


def setup_logging(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the application.
    
    Args:
        level: Logging level. If None, reads LOG_LEVEL (default INFO).
        format_string: Custom format string. If None, uses default.
        datefmt: Date format string. If None, uses default.
        force: If True, reconfigure even if already configured.
    """
    global _logging_configured
    
    if _logging_configured and not force:
        return
    
    if level is None:
        level = level_from_env()
    
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    
    if datefmt is None:
        datefmt = "%Y-%m-%d %H:%M:%S"
    
    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=datefmt,
        stream=sys.stderr,
        force=force,
    )
    
    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        Logger instance
    """
    return logging.getLogger(name)
