"""Logging setup for services that embed neo-authz.

Everything is driven by environment variables so the host service controls
verbosity without code changes:

- ``LOG_LEVEL``: explicit level, overrides ``LOG_VERBOSITY``
- ``LOG_VERBOSITY``: QUIET, NORMAL, VERBOSE or DEBUG
- ``LOG_FORMAT``: simple, detailed or json
- ``ENABLE_SQL_LOGGING``: let asyncpg and the PostgreSQL store log below WARNING
- ``AUTHZ_LOG_DECISIONS``: log enforcer decisions at DEBUG regardless of level

Log records never carry policy tuples, only domains, operations and error codes.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}

_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: LogLevel.ERROR,
    LogVerbosity.NORMAL: LogLevel.WARNING,
    LogVerbosity.VERBOSE: LogLevel.INFO,
    LogVerbosity.DEBUG: LogLevel.DEBUG,
}

# Storage loggers, quiet unless ENABLE_SQL_LOGGING is set
STORAGE_LOGGERS = (
    "asyncpg",
    "neo_authz.features.permissions.repositories.asyncpg_policy_store",
)

ENFORCER_LOGGER = "neo_authz.features.permissions.services.enforcer"


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Level for a verbosity mode; WARNING for anything unrecognised."""
    try:
        return _VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())].value
    except ValueError:
        return LogLevel.WARNING.value


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


def _effective_level() -> str:
    explicit = os.getenv("LOG_LEVEL", "").upper()
    if explicit in LogLevel.__members__:
        return explicit
    return get_log_level_from_verbosity(os.getenv("LOG_VERBOSITY", LogVerbosity.NORMAL.value))


def _format_string() -> str:
    try:
        return FORMAT_STRINGS[LogFormat(os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value).lower())]
    except ValueError:
        return FORMAT_STRINGS[LogFormat.SIMPLE]


class LoggingConfig:
    """Builds and applies the dictConfig for an embedding service."""

    # Third-party clients that only report errors
    ERROR_ONLY_MODULES = ("asyncio", "httpx", "httpcore", "redis")

    @classmethod
    def build(cls) -> Dict[str, Any]:
        level = _effective_level()

        def logger_entry(logger_level: str) -> Dict[str, Any]:
            return {"level": logger_level, "handlers": ["console"], "propagate": False}

        loggers = {module: logger_entry("ERROR") for module in cls.ERROR_ONLY_MODULES}

        if not _env_flag("ENABLE_SQL_LOGGING"):
            storage_level = "DEBUG" if level == LogLevel.DEBUG.value else "WARNING"
            loggers.update({module: logger_entry(storage_level) for module in STORAGE_LOGGERS})

        if _env_flag("AUTHZ_LOG_DECISIONS"):
            loggers[ENFORCER_LOGGER] = logger_entry("DEBUG")

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": _format_string(), "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": "DEBUG",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls) -> None:
        config = cls.build()
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(f"Logging configured at {config['root']['level']}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))

    @classmethod
    def silence_module(cls, module_name: str) -> None:
        cls.set_module_level(module_name, "CRITICAL")


def setup_logging() -> None:
    """Apply the environment-driven configuration. Call once at service startup."""
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
