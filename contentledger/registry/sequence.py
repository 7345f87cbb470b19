# contentledger/registry/sequence.py
"""
Identifier allocation and sequence height.

The global sequence only moves forward. ``next_id`` peeks at the value the
next registration will receive; the counter itself advances only when the
registration commits.
"""

import logging

logger = logging.getLogger(__name__)


class SequenceAllocator:
    """
    Allocates unique, strictly increasing content ids.

    Ids start at 1. Deleting content never returns its id to the pool.
    """

    def __init__(self, current: int = 0):
        if current < 0:
            raise ValueError(f"Sequence cannot start below zero: {current}")
        self._current = current

    @property
    def current(self) -> int:
        """Highest id handed out so far (0 when nothing is registered)."""
        return self._current

    def next_id(self) -> int:
        """Return the id the next registration will receive."""
        return self._current + 1

    def commit(self, content_id: int) -> None:
        """Advance the counter to a freshly allocated id."""
        if content_id != self._current + 1:
            raise ValueError(
                f"Sequence out of order: expected {self._current + 1}, got {content_id}"
            )
        self._current = content_id
        logger.debug(f"Sequence advanced to {content_id}")

    def rollback(self, content_id: int) -> None:
        """Undo a commit whose surrounding transaction failed."""
        if content_id != self._current:
            raise ValueError(f"Cannot roll back {content_id}, head is {self._current}")
        self._current = content_id - 1


class LedgerHeight:
    """
    Default sequence height source.

    Starts at 0 and advances by one for every committed mutating operation,
    standing in for the block height an execution environment would supply.
    Callable, so it can be swapped for any ``() -> int`` the host provides.
    """

    def __init__(self, height: int = 0):
        self.height = height

    def __call__(self) -> int:
        return self.height

    def advance(self) -> int:
        self.height += 1
        return self.height
