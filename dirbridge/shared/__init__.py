"""
Shared plumbing for the dirbridge gates: logging, error handling, health.
"""

from dirbridge.shared.gate import (
    ROOT_LOGGER_NAME,
    GateLogger,
    GateErrorHandler,
    GateHealth,
    build_health_status,
    get_logger,
)

__all__ = [
    "ROOT_LOGGER_NAME",
    "GateLogger",
    "GateErrorHandler",
    "GateHealth",
    "build_health_status",
    "get_logger",
]
