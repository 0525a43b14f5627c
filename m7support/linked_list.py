"""Doubly ended list that is added to at the head and drained from the tail."""

from __future__ import annotations

import enum
import logging
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

_log = logging.getLogger(__name__)

Dealloc = Optional[Callable[[Any], None]]


class ListStatus(enum.IntEnum):
    """Status codes of list operations."""

    SUCCESS = 0
    FAILURE_GENERAL = -1
    INVALID_PARAMETER = -2
    INVALID_HANDLE = -3
    UNAVAILABLE_RESOURCE = -4
    INSUFFICIENT_BUFFER = -5


class LinkedListError(Exception):
    """Raised when a list operation fails; carries the failing status."""

    def __init__(self, status: ListStatus, message: str = "") -> None:
        super().__init__(message or status.name)
        self.status = status


class LinkedList:
    """A list of items, each with an optional deallocation callback.

    Items are added at the head; ``remove`` takes the oldest item from the
    tail, so the list behaves as a FIFO queue.
    """

    def __init__(self) -> None:
        self._entries: Deque[Tuple[Any, Dealloc]] = deque()

    def add(self, item: Any, dealloc: Dealloc = None) -> None:
        """Add ``item`` at the head of the list.

        ``dealloc`` is called with the item if it is discarded by ``flush``
        or by a removing ``search`` that does not hand the item back.
        """
        if item is None:
            _log.error("add: invalid input parameter")
            raise LinkedListError(ListStatus.INVALID_PARAMETER, "item must not be None")
        _log.debug("add: adding %r", item)
        self._entries.appendleft((item, dealloc))

    def remove(self) -> Any:
        """Remove and return the item at the tail (the oldest one)."""
        if not self._entries:
            raise LinkedListError(ListStatus.UNAVAILABLE_RESOURCE, "list is empty")
        item, _ = self._entries.pop()
        return item

    def is_empty(self) -> bool:
        """Tell whether the list holds no items."""
        return not self._entries

    def flush(self) -> None:
        """Remove every item, calling its deallocation callback if it has one."""
        while self._entries:
            item, dealloc = self._entries.popleft()
            if dealloc is not None:
                dealloc(item)

    def search(
        self,
        match: Callable[[Any], bool],
        remove: bool = False,
        keep: bool = True,
    ) -> Any:
        """Find the first item from the head for which ``match`` is true.

        With ``remove`` the found item is taken out of the list. With
        ``keep`` false the item is not handed back: a removed item is then
        passed to its deallocation callback and ``None`` is returned.
        Returns the found item, or ``None`` if nothing matched.
        """
        if match is None:
            raise LinkedListError(ListStatus.INVALID_HANDLE, "no match function")
        if not self._entries:
            raise LinkedListError(ListStatus.UNAVAILABLE_RESOURCE, "list is empty")

        for position, (item, dealloc) in enumerate(self._entries):
            if not match(item):
                continue
            if remove:
                del self._entries[position]
                if not keep and dealloc is not None:
                    dealloc(item)
            return item if keep else None
        return None

    def __len__(self) -> int:
        return len(self._entries)