"""Network-initiated location requests: user notification and response."""

from __future__ import annotations

import enum
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .loc_log import VOID_RET, loc_logger
from .msg_ids import MESSAGE_IDS

LOC_NI_NO_RESPONSE_TIME = 20
"""Seconds to wait for a user response when the request gives no timeout."""

LOC_NI_NOTIF_KEY_ADDRESS = "Address"

NI_RESPONSE_GRACE = 5
"""Seconds added to every response timeout."""

GPS_NI_NEED_NOTIFY = 0x0001
GPS_NI_NEED_VERIFY = 0x0002
GPS_NI_PRIVACY_OVERRIDE = 0x0004

Sender = Callable[[Any], Any]
NotifyCallback = Callable[["NiNotification"], Any]
MuteSession = Callable[[], Any]


class NiResponse(enum.IntEnum):
    """The user's answer to a network-initiated request."""

    ACCEPT = 1
    DENY = 2
    NORESP = 3


@dataclass
class NiNotification:
    """A network-initiated request as shown to the user."""

    ni_type: int = 0
    notify_flags: int = 0
    timeout: float = 0
    default_response: NiResponse = NiResponse.NORESP
    requestor_id: str = ""
    text: str = ""
    requestor_id_encoding: int = 0
    text_encoding: int = 0
    extras: str = ""
    notification_id: int = 0


@dataclass(frozen=True)
class InformNiResponse:
    """Engine message passing the user's response back with the raw request."""

    response: NiResponse
    raw_request: Any

    @property
    def msg_id(self) -> int:
        """Identifier of this message in the engine."""
        return MESSAGE_IDS["LOC_ENG_MSG_INFORM_NI_RESPONSE"]


class NiHandler:
    """Tracks one network-initiated request at a time.

    A request is handed to the registered notify callback and a worker
    thread waits for :meth:`respond`; if no response comes in time the
    request is answered with :attr:`NiResponse.NORESP`. The answer is
    delivered through ``sender`` as an :class:`InformNiResponse`.
    ``mute_session`` is called for requests that override privacy.
    """

    def __init__(
        self,
        sender: Sender,
        mute_session: Optional[MuteSession] = None,
        grace: float = NI_RESPONSE_GRACE,
        no_response_time: float = LOC_NI_NO_RESPONSE_TIME,
    ) -> None:
        self._sender = sender
        self._mute_session = mute_session
        self._grace = grace
        self._no_response_time = no_response_time
        self._cond = threading.Condition()
        self.notify: Optional[NotifyCallback] = None
        self.thread: Optional[threading.Thread] = None
        self.resp_time_left: float = 0
        self.resp_recvd = False
        self.raw_request: Any = None
        self.req_id = 0
        self.resp = NiResponse.NORESP

    @property
    def busy(self) -> bool:
        """Whether a request is waiting for its response."""
        return self.raw_request is not None

    def init(self, notify: Optional[NotifyCallback]) -> None:
        """Register the callback that shows requests to the user."""
        loc_logger.info("===> ni init")
        if notify is None:
            loc_logger.verbose("Exiting ni init: failed, no cb.")
            raise ValueError("notify callback must not be None")
        if self.notify is not None:
            loc_logger.verbose("Exiting ni init: already inited.")
            raise RuntimeError("NI handler already initialized")
        with self._cond:
            self.resp_time_left = 0
            self.resp_recvd = False
            self.raw_request = None
            self.req_id = 0
        self.notify = notify

    def request(self, notification: NiNotification, raw_request: Any) -> bool:
        """Show ``notification`` and start waiting for the user's response.

        Returns ``False`` if another request is still in progress, in which
        case the new one is ignored.
        """
        if self.notify is None:
            loc_logger.verbose("Exiting ni request: ni init hasn't happened yet.")
            raise RuntimeError("NI handler not initialized")

        if self.raw_request is not None:
            loc_logger.warning(
                "ni request, notification in progress, new NI request ignored, "
                f"type: {notification.ni_type}"
            )
            return False

        self.raw_request = raw_request
        notification.notification_id = self.req_id

        if notification.notify_flags == GPS_NI_PRIVACY_OVERRIDE and self._mute_session:
            self._mute_session()

        loc_logger.info(
            f"Notification: notif_type: {notification.ni_type}, "
            f"timeout: {notification.timeout}, "
            f"default_resp: {int(notification.default_response)}"
        )
        loc_logger.info(
            f"              requestor_id: {notification.requestor_id} "
            f"(encoding: {notification.requestor_id_encoding})"
        )
        loc_logger.info(
            f"              text: {notification.text} text "
            f"(encoding: {notification.text_encoding})"
        )
        if notification.extras:
            loc_logger.info(f"              extras: {notification.extras}")

        wait = notification.timeout if notification.timeout else self._no_response_time
        self.resp_time_left = self._grace + wait
        loc_logger.info(
            f"Automatically sends 'no response' in {self.resp_time_left} seconds "
            "(to clear status)"
        )

        self.thread = threading.Thread(target=self._wait_for_response, daemon=True)
        self.thread.start()

        loc_logger.info(f"<=== ni_notify_cb - id {notification.notification_id}")
        self.notify(notification)
        return True

    def _wait_for_response(self) -> None:
        loc_logger.debug("Starting Loc NI thread...")
        message: Optional[InformNiResponse] = None
        with self._cond:
            deadline = time.monotonic() + self.resp_time_left
            answered = self._cond.wait_for(
                lambda: self.resp_recvd, timeout=max(deadline - time.monotonic(), 0)
            )
            if not answered:
                self.resp = NiResponse.NORESP
                loc_logger.debug("ni thread timed out waiting for a response")
            self.resp_recvd = False
            if self.raw_request is not None:
                message = InformNiResponse(self.resp, self.raw_request)
                self.raw_request = None
            self.resp_time_left = 0
            self.req_id += 1

        if message is not None:
            self._sender(message)
        loc_logger.verbose(f"Exiting ni thread {VOID_RET}")

    def respond(self, notif_id: int, response: NiResponse) -> bool:
        """Pass the user's ``response`` to request ``notif_id``.

        Returns ``False`` if no request with that id is waiting.
        """
        loc_logger.info("===> ni respond")
        if self.notify is None:
            loc_logger.verbose("Exiting ni respond: ni init hasn't happened yet.")
            raise RuntimeError("NI handler not initialized")

        with self._cond:
            if notif_id != self.req_id or self.raw_request is None:
                loc_logger.error(
                    f"ni respond: reqID {self.req_id} and notif_id {notif_id} mismatch "
                    f"or rawRequest {self.raw_request!r}, response: {int(response)}"
                )
                return False
            loc_logger.info(
                f"ni respond: send user response {int(response)} for notif {notif_id}"
            )
            self.resp = NiResponse(response)
            self.resp_recvd = True
            self._cond.notify()
        return True

    def reset_on_engine_restart(self) -> None:
        """Drop a pending request after the engine restarted, sending nothing."""
        if self.notify is None:
            loc_logger.verbose("Exiting ni reset: ni init hasn't happened yet.")
            return
        if self.raw_request is not None:
            with self._cond:
                self.raw_request = None
                self.resp_recvd = True
                self._cond.notify()