"""
Logging module for the hospital finance engine.
"""

from .logger_config import (
    LoggerConfig,
    logger_config,
    configure_logging,
    get_logger,
    get_audit_logger
)

__all__ = [
    'LoggerConfig',
    'logger_config',
    'configure_logging',
    'get_logger',
    'get_audit_logger'
]
