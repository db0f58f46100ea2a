# ============================================================================
# MODULE CONTEXT - LOGGING
# ============================================================================
# STATUS: Shared by csapi and csapi_api
# PURPOSE: JSON-only structured logging for the CSAPI client and HTTP endpoints
# EXPORTS: ComponentType, LogLevel, LoggerFactory, JSONFormatter
# INTERFACES: Dataclass config, enums, factory, JSON formatter
# DEPENDENCIES: enum, dataclasses, typing, datetime, logging, json (stdlib only!)
# SCOPE: Logging for every layer (client, resolver, filters, service)
# PATTERNS: JSON-only output, component-scoped loggers
# ENTRY_POINTS: LoggerFactory.create_logger()
# ============================================================================

"""
Unified Logger System

Component-specific JSON loggers for the CSAPI client library.

Design Principles:
- Strong typing with dataclasses (stdlib only)
- Enum safety for categories
- Component-specific loggers
- Clean factory pattern

Date: 19 OCT 2026
"""

from enum import Enum
from typing import Optional
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import os
import sys
import json


# ============================================================================
# COMPONENT TYPES - Aligned with library layers
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the library layers.

    Each layer has specific logging needs and levels.
    """
    CLIENT = "client"          # Resource clients (HTTP access)
    RESOLVER = "resolver"      # Data resolution (fixture/live/client modes)
    REPOSITORY = "repository"  # Fixture storage and cache
    FILTER = "filter"          # Normalization and filtering
    SERVICE = "service"        # HTTP endpoint business logic and health


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO
    max_message_length: int = 1000


# ============================================================================
# JSON FORMATTER - Structured logging
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Outputs one JSON object per line so Application Insights can parse it.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

def _default_level() -> LogLevel:
    """DEBUG when CSAPI_DEBUG_LOGGING=true, INFO otherwise."""
    if os.getenv('CSAPI_DEBUG_LOGGING', '').lower() == 'true':
        return LogLevel.DEBUG
    return LogLevel.INFO


class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.CLIENT,
            "SystemsClient"
        )
        logger.info("Listing systems")
    """

    @classmethod
    def default_config(cls, component_type: ComponentType) -> ComponentConfig:
        """Default configuration for a component type."""
        level = _default_level()
        if component_type == ComponentType.REPOSITORY:
            # Fixture reads are always traced
            level = LogLevel.DEBUG
        return ComponentConfig(component_type=component_type, log_level=level)

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "DataResolver")
            config: Optional custom configuration

        Returns:
            Configured Python logger
        """
        if config is None:
            config = cls.default_config(component_type)

        logger_name = f"csapi.{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

        # Allow propagation to the host's root logger
        logger.propagate = True

        original_log = logger._log
        max_length = config.max_message_length

        def log_with_dimensions(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
            """Wrapper to inject component identity as custom dimensions."""
            if extra is None:
                extra = {}

            custom_dims = {
                'component_type': component_type.value,
                'component_name': name
            }

            if 'custom_dimensions' in extra:
                custom_dims.update(extra['custom_dimensions'])
            extra['custom_dimensions'] = custom_dims

            if isinstance(msg, str) and len(msg) > max_length:
                msg = msg[:max_length] + '...'

            original_log(level, msg, args, exc_info=exc_info, extra=extra,
                         stack_info=stack_info, stacklevel=stacklevel)

        logger._log = log_with_dimensions

        return logger
