"""XTRA assistance data: download requests and injection into the engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .loc_log import loc_logger
from .msg_ids import MESSAGE_IDS

Sender = Callable[[Any], Any]
DownloadRequest = Callable[[], Any]


@dataclass(frozen=True)
class InjectXtraData:
    """Engine message carrying XTRA data to be injected."""

    data: bytes

    @property
    def msg_id(self) -> int:
        """Identifier of this message in the engine."""
        return MESSAGE_IDS["LOC_ENG_MSG_INJECT_XTRA_DATA"]

    @property
    def length(self) -> int:
        """Number of bytes of XTRA data."""
        return len(self.data)


class XtraModule:
    """XTRA state of the location engine.

    ``sender`` delivers engine messages, for example a message queue's
    ``send`` method.
    """

    def __init__(self, sender: Sender) -> None:
        self._sender = sender
        self.download_request: Optional[DownloadRequest] = None

    def init(self, download_request: Optional[DownloadRequest]) -> None:
        """Register the callback that asks the framework to download XTRA data."""
        if download_request is None:
            loc_logger.error("xtra init: failed, cb is None")
            raise ValueError("download request callback must not be None")
        self.download_request = download_request

    def inject_data(self, data: bytes) -> InjectXtraData:
        """Send ``data`` to the engine for injection and return the message sent."""
        message = InjectXtraData(bytes(data))
        self._sender(message)
        return message