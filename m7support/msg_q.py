"""Thread-safe FIFO message queue built on :class:`LinkedList`."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable, Optional

from .linked_list import LinkedList, LinkedListError, ListStatus

_log = logging.getLogger(__name__)

Dealloc = Optional[Callable[[Any], None]]


class QueueStatus(enum.IntEnum):
    """Status codes of message queue operations."""

    SUCCESS = 0
    FAILURE_GENERAL = -1
    INVALID_PARAMETER = -2
    INVALID_HANDLE = -3
    UNAVAILABLE_RESOURCE = -4
    INSUFFICIENT_BUFFER = -5


class MessageQueueError(Exception):
    """Raised when a queue operation fails; carries the failing status."""

    def __init__(self, status: QueueStatus, message: str = "") -> None:
        super().__init__(message or status.name)
        self.status = status


_LIST_TO_QUEUE = {
    ListStatus.SUCCESS: QueueStatus.SUCCESS,
    ListStatus.INVALID_PARAMETER: QueueStatus.INVALID_PARAMETER,
    ListStatus.INVALID_HANDLE: QueueStatus.INVALID_HANDLE,
    ListStatus.UNAVAILABLE_RESOURCE: QueueStatus.UNAVAILABLE_RESOURCE,
    ListStatus.INSUFFICIENT_BUFFER: QueueStatus.INSUFFICIENT_BUFFER,
}


def status_from_list_status(status: ListStatus) -> QueueStatus:
    """Map a list status onto the matching queue status.

    Anything without a counterpart becomes ``FAILURE_GENERAL``.
    """
    return _LIST_TO_QUEUE.get(status, QueueStatus.FAILURE_GENERAL)


def _queue_error(error: LinkedListError) -> MessageQueueError:
    return MessageQueueError(status_from_list_status(error.status), str(error))


class MessageQueue:
    """A blocking FIFO queue of messages.

    Once :meth:`unblock` has been called every waiting receiver wakes up and
    the queue refuses further sends and receives.
    """

    def __init__(self) -> None:
        self._messages = LinkedList()
        self._cond = threading.Condition()
        self._unblocked = False

    @property
    def unblocked(self) -> bool:
        """Whether the queue has been unblocked and is out of use."""
        return self._unblocked

    def __len__(self) -> int:
        with self._cond:
            return len(self._messages)

    def send(self, message: Any, dealloc: Dealloc = None) -> None:
        """Put ``message`` on the queue and wake one waiting receiver.

        ``dealloc`` is called with the message if it is discarded by
        :meth:`flush`.
        """
        if message is None:
            _log.error("send: invalid message parameter")
            raise MessageQueueError(QueueStatus.INVALID_PARAMETER, "message must not be None")
        with self._cond:
            _log.debug("send: sending message %r", message)
            if self._unblocked:
                _log.error("send: message queue has been unblocked")
                raise MessageQueueError(
                    QueueStatus.UNAVAILABLE_RESOURCE, "message queue has been unblocked"
                )
            try:
                self._messages.add(message, dealloc)
            except LinkedListError as error:
                raise _queue_error(error) from error
            finally:
                self._cond.notify()
        _log.debug("send: finished sending message %r", message)

    def receive(self) -> Any:
        """Wait for and return the oldest message on the queue.

        Raises :class:`MessageQueueError` with ``UNAVAILABLE_RESOURCE`` if the
        queue is, or becomes while waiting, unblocked with nothing in it.
        """
        _log.debug("receive: waiting on message")
        with self._cond:
            if self._unblocked:
                _log.error("receive: message queue has been unblocked")
                raise MessageQueueError(
                    QueueStatus.UNAVAILABLE_RESOURCE, "message queue has been unblocked"
                )
            self._cond.wait_for(lambda: not self._messages.is_empty() or self._unblocked)
            try:
                message = self._messages.remove()
            except LinkedListError as error:
                raise _queue_error(error) from error
        _log.debug("receive: received message %r", message)
        return message

    def flush(self) -> None:
        """Discard every queued message, calling its deallocation callback."""
        _log.debug("flush: flushing message queue")
        with self._cond:
            try:
                self._messages.flush()
            except LinkedListError as error:
                raise _queue_error(error) from error
        _log.debug("flush: message queue flushed")

    def unblock(self) -> None:
        """Stop use of the queue and wake every waiting receiver."""
        with self._cond:
            if self._unblocked:
                _log.error("unblock: message queue has been unblocked")
                raise MessageQueueError(
                    QueueStatus.UNAVAILABLE_RESOURCE, "message queue has been unblocked"
                )
            _log.debug("unblock: unblocking message queue")
            self._unblocked = True
            self._cond.notify_all()
        _log.debug("unblock: message queue unblocked")