from typing import Callable, Optional

from mcp.server.fastmcp.utilities.logging import get_logger

LogFn = Callable[[str], None]

logger = get_logger("mintme")

_custom_logger: Optional[LogFn] = None


def set_custom_logger(logger_function: Optional[LogFn]) -> None:
    """Sets the process-wide log function; None restores the default logger."""
    global _custom_logger
    _custom_logger = logger_function


def resolve_log_fn(override: Optional[LogFn] = None) -> LogFn:
    """Returns the log function for one operation call."""
    if override is not None:
        return override
    if _custom_logger is not None:
        return _custom_logger
    return logger.info
