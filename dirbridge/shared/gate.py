"""
Gate plumbing shared by the dirbridge packages.

Every gate logs through a child of the ``dirbridge`` logger, routes
unexpected exceptions through one handler and reports health in one dict
shape:

- GateLogger: per-gate loggers and level control
- GateErrorHandler: log-and-default error handling, OS error text
- GateHealth / build_health_status: health reporting
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)


ROOT_LOGGER_NAME = "dirbridge"
LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"


def _coerce_level(level: Union[int, str]) -> int:
    """Level number for an int or a name such as "debug"; INFO if unknown."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


# =============================================================================
# GateLogger
# =============================================================================


class GateLogger:
    """
    Loggers for the gates, all under the ``dirbridge`` namespace.

    The first lookup attaches a stream handler to ``dirbridge`` unless the
    host application has attached its own. Records still propagate to the
    root logger.
    """

    _loggers: Dict[str, logging.Logger] = {}
    _configured = False

    @classmethod
    def _ensure_configured(cls) -> logging.Logger:
        namespace = logging.getLogger(ROOT_LOGGER_NAME)
        if not cls._configured:
            if not namespace.handlers:
                handler = logging.StreamHandler()
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                namespace.addHandler(handler)
                namespace.setLevel(logging.INFO)
            cls._configured = True
        return namespace

    @classmethod
    def get(cls, gate_name: str) -> logging.Logger:
        """
        Logger for one gate, e.g. ``dirbridge.DirectoryGate``.

        Args:
            gate_name: Gate or package name ("DirectoryGate", "Config")
        """
        cls._ensure_configured()

        logger_name = f"{ROOT_LOGGER_NAME}.{gate_name}"
        logger = cls._loggers.get(logger_name)
        if logger is None:
            logger = cls._loggers[logger_name] = logging.getLogger(logger_name)
        return logger

    @classmethod
    def set_level(cls, level: Union[int, str], gate_name: Optional[str] = None):
        """
        Change the logging level.

        Args:
            level: logging constant or level name from configuration
                ("DEBUG", "warning"); unknown names mean INFO
            gate_name: One gate only, or None for the whole namespace
        """
        level = _coerce_level(level)
        if gate_name:
            cls.get(gate_name).setLevel(level)
        else:
            cls._ensure_configured().setLevel(level)


# =============================================================================
# GateErrorHandler
# =============================================================================


class GateErrorHandler:
    """Log-and-default handling for failures a gate does not expect."""

    @staticmethod
    def describe(exception: BaseException) -> str:
        """
        Error text as the OS reports it.

        OSErrors become "<strerror>: <filename>" (or just the strerror),
        anything else its str(); falls back to the exception class name.
        """
        if isinstance(exception, OSError) and exception.strerror:
            if exception.filename:
                return f"{exception.strerror}: {exception.filename}"
            return exception.strerror
        return str(exception) or type(exception).__name__

    @staticmethod
    def handle(
        gate_name: str,
        operation: str,
        exception: Exception,
        default_return: Any = None,
        log_level: int = logging.ERROR,
    ) -> Any:
        """
        Log a failed operation on the gate's logger.

        Args:
            gate_name: Gate whose logger records the failure
            operation: What was being done ("writeFile", "portal detection")
            exception: What went wrong
            default_return: Returned unchanged
            log_level: Level of the log record

        Returns:
            default_return
        """
        GateLogger.get(gate_name).log(
            log_level, f"{operation} failed: {GateErrorHandler.describe(exception)}"
        )
        return default_return

    @staticmethod
    def wrap(
        gate_name: str,
        operation: str,
        default_return: Any = None,
        log_level: int = logging.ERROR,
        reraise: bool = False,
    ):
        """
        Decorate a function so exceptions are logged through handle().

        The decorated function returns default_return on failure, or
        re-raises after logging when reraise is set.
        """
        def decorator(func: Callable) -> Callable:
            @wraps(func)
            def wrapper(*args, **kwargs):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    GateErrorHandler.handle(gate_name, operation, e, log_level=log_level)
                    if reraise:
                        raise
                    return default_return
            return wrapper
        return decorator


# =============================================================================
# Health
# =============================================================================


@runtime_checkable
class GateHealth(Protocol):
    """Health reporting every gate class provides."""

    @classmethod
    def is_healthy(cls) -> bool:
        ...

    @classmethod
    def get_health_status(cls) -> Dict[str, Any]:
        """Dict as built by build_health_status()."""
        ...

    @classmethod
    def get_dependencies(cls) -> List[str]:
        """External things the gate relies on (filesystem, dialog tools)."""
        ...


def build_health_status(
    gate_name: str,
    initialized: bool,
    dependencies: List[str],
    checks: Dict[str, bool],
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Health dict shared by all gates.

    A gate is healthy when it is initialized and every check passed; no
    checks counts as passing.
    """
    return {
        "gate": gate_name,
        "healthy": initialized and all(checks.values()),
        "initialized": initialized,
        "dependencies": dependencies,
        "checks": checks,
        "details": details or {},
    }


def get_logger(gate_name: str) -> logging.Logger:
    """Shortcut for GateLogger.get()."""
    return GateLogger.get(gate_name)
