"""Suppression flag raised while a keyboard zone move is in progress.

Unrelated UI (notifications, reminders) checks `active` and stays quiet
until the move finishes.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class SuppressionFlag:
    """Shared flag, owned by the daemon and passed to whoever needs it."""

    def __init__(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @contextmanager
    def raised(self) -> Iterator[None]:
        """Set the flag for the duration of the block; always cleared on exit."""
        self._active = True
        logger.debug("Suppression raised")
        try:
            yield
        finally:
            self._active = False
            logger.debug("Suppression cleared")
