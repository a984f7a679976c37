"""
Convergence polling helper.
"""
import logging
import time
from typing import Callable

logger = logging.getLogger("flashcache-agent")


def wait_until(
    predicate: Callable[[], bool],
    interval: float,
    description: str,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Block until predicate() is true, checking every `interval` seconds.
    There is no deadline: the caller's process timeout bounds the wait.
    """
    attempts = 0
    while not predicate():
        attempts += 1
        logger.debug("%s has not converged yet (attempt %d), waiting", description, attempts)
        sleep(interval)
    if attempts:
        logger.debug("%s converged after %d wait(s)", description, attempts)
