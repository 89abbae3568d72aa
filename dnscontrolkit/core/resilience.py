"""
Best-effort execution of optional side operations.

Cache restore/save and cleanup of temporary artifacts must never fail a
setup run. They go through best_effort(), which logs a warning and returns a
fallback value instead of raising.
"""

import logging
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def best_effort(
    action: Callable[[], T],
    description: str,
    default: Optional[T] = None,
    log: Optional[logging.Logger] = None,
) -> Optional[T]:
    """
    Run action, downgrading any exception to a warning.

    Args:
        action: Zero-argument callable to run
        description: Human readable name of the operation for the warning
        default: Value returned when the action raises
        log: Logger to report through (default: this module's logger)

    Returns:
        The action's result, or default if it raised

    Example:
        >>> hit = best_effort(lambda: backend.restore(paths, key), "Cache restore", False)
    """
    try:
        return action()
    except Exception as e:
        (log or logger).warning(f"{description} failed: {e}")
        return default
