"""
Centralized logging configuration for the hospital finance engine.

Provides structured logging through structlog on top of the standard
library, with an optional set of rotating log files per component
(dataset generation, security audit, system, errors).
"""

import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, List

import structlog
from structlog.stdlib import LoggerFactory

from ..config.settings import Settings


class LoggerConfig:
    """Centralized logger configuration and management."""

    def __init__(self, base_log_dir: str = "logs"):
        self.base_log_dir = Path(base_log_dir)
        self.configured = False

        # Log file configurations
        self.log_configs = {
            "dataset": {
                "filename": "dataset_generation.log",
                "max_bytes": 50 * 1024 * 1024,  # 50MB
                "backup_count": 5,
                "level": logging.INFO
            },
            "security": {
                "filename": "security_audit.log",
                "max_bytes": 100 * 1024 * 1024,  # 100MB
                "backup_count": 20,  # Keep more security logs
                "level": logging.INFO
            },
            "system": {
                "filename": "system.log",
                "max_bytes": 100 * 1024 * 1024,  # 100MB
                "backup_count": 10,
                "level": logging.INFO
            },
            "error": {
                "filename": "errors.log",
                "max_bytes": 100 * 1024 * 1024,  # 100MB
                "backup_count": 10,
                "level": logging.ERROR
            }
        }

        # Logger name prefix -> log type
        self.log_routes = {
            "hospital_finance.processing": "dataset",
            "hospital_finance.core.security": "security",
            "hospital_finance.analytics": "security",
            "security": "security",
        }

    def get_file_handler(self, log_type: str, config: Dict[str, Any]) -> logging.Handler:
        """Create a rotating file handler for the specified log type."""
        log_dir = self.base_log_dir / log_type
        log_dir.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            filename=str(log_dir / config["filename"]),
            maxBytes=config["max_bytes"],
            backupCount=config["backup_count"],
            encoding="utf-8"
        )
        handler.setLevel(config["level"])

        if log_type != "error":
            prefixes = [prefix for prefix, target in self.log_routes.items() if target == log_type]
            if log_type == "system":
                handler.addFilter(_ExcludeFilter(list(self.log_routes)))
            else:
                handler.addFilter(_PrefixFilter(prefixes))

        return handler

    def build_handlers(self, settings: Settings) -> List[logging.Handler]:
        """Console handler plus, when enabled, one rotating file per log type."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(settings.effective_log_level)
        handlers: List[logging.Handler] = [console_handler]

        if settings.log_to_file:
            for log_type, config in self.log_configs.items():
                handlers.append(self.get_file_handler(log_type, config))

        return handlers

    def configure(self, settings: Settings) -> None:
        """Set up structlog and the stdlib handlers it renders into."""
        self.base_log_dir = Path(settings.log_dir)

        renderer = (
            structlog.processors.JSONRenderer()
            if settings.use_json_logs
            else structlog.dev.ConsoleRenderer(colors=False)
        )

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
                renderer,
            ],
            context_class=dict,
            logger_factory=LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            level=settings.effective_log_level,
            format="%(message)s",
            handlers=self.build_handlers(settings),
            force=True,
        )

        self.configured = True

    def get_logger(self, name: str) -> Any:
        """Get a structured logger instance."""
        return structlog.get_logger(name)

    def get_audit_logger(self) -> Any:
        """Get a specialized audit logger for data access decisions."""
        return structlog.get_logger("security.audit").bind(audit=True)


class _PrefixFilter(logging.Filter):
    """Pass records whose logger name starts with one of the prefixes."""

    def __init__(self, prefixes: List[str]):
        super().__init__()
        self.prefixes = tuple(prefixes)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.startswith(self.prefixes)


class _ExcludeFilter(_PrefixFilter):

    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(self.prefixes)


# Global logger configuration instance
logger_config = LoggerConfig()

# Convenience functions
def configure_logging(settings: Settings) -> None:
    """Configure logging for the process."""
    logger_config.configure(settings)

def get_logger(name: str) -> Any:
    """Get a logger instance."""
    return logger_config.get_logger(name)

def get_audit_logger() -> Any:
    """Get the audit logger."""
    return logger_config.get_audit_logger()
