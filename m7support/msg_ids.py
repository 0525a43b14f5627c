"""Identifiers of the messages passed inside the location engine."""

from __future__ import annotations

from typing import Dict, List, Tuple, Union

_Entry = Union[str, Tuple[str, int]]

_ENGINE_MESSAGES: List[_Entry] = [
    # 0x000 - 0x0EF is reserved for the daemon, 0x0F0 - 0x1FF for daemon and
    # framework communication.
    ("LOC_ENG_MSG_QUIT", 0x200),
    "LOC_ENG_MSG_ENGINE_DOWN",
    "LOC_ENG_MSG_ENGINE_UP",
    "LOC_ENG_MSG_START_FIX",
    "LOC_ENG_MSG_STOP_FIX",
    "LOC_ENG_MSG_SET_POSITION_MODE",
    "LOC_ENG_MSG_SET_TIME",
    "LOC_ENG_MSG_INJECT_XTRA_DATA",
    "LOC_ENG_MSG_INJECT_LOCATION",
    "LOC_ENG_MSG_DELETE_AIDING_DATA",
    "LOC_ENG_MSG_SET_APN",
    "LOC_ENG_MSG_SET_SERVER_URL",
    "LOC_ENG_MSG_SET_SERVER_IPV4",
    "LOC_ENG_MSG_ENABLE_DATA",
    "LOC_ENG_MSG_SUPL_VERSION",
    "LOC_ENG_MSG_SET_SENSOR_CONTROL_CONFIG",
    "LOC_ENG_MSG_SET_SENSOR_PROPERTIES",
    "LOC_ENG_MSG_SET_SENSOR_PERF_CONTROL_CONFIG",
    "LOC_ENG_MSG_MUTE_SESSION",
    "LOC_ENG_MSG_ATL_OPEN_SUCCESS",
    "LOC_ENG_MSG_ATL_CLOSED",
    "LOC_ENG_MSG_ATL_OPEN_FAILED",
    "LOC_ENG_MSG_REPORT_POSITION",
    "LOC_ENG_MSG_REPORT_SV",
    "LOC_ENG_MSG_REPORT_STATUS",
    "LOC_ENG_MSG_REPORT_NMEA",
    "LOC_ENG_MSG_REQUEST_BIT",
    "LOC_ENG_MSG_RELEASE_BIT",
    "LOC_ENG_MSG_REQUEST_ATL",
    "LOC_ENG_MSG_RELEASE_ATL",
    "LOC_ENG_MSG_REQUEST_WIFI",
    "LOC_ENG_MSG_RELEASE_WIFI",
    "LOC_ENG_MSG_REQUEST_NI",
    "LOC_ENG_MSG_INFORM_NI_RESPONSE",
    "LOC_ENG_MSG_REQUEST_XTRA_DATA",
    "LOC_ENG_MSG_REQUEST_TIME",
    "LOC_ENG_MSG_REQUEST_POSITION",
    "LOC_ENG_MSG_EXT_POWER_CONFIG",
]

_ULP_MESSAGES: List[_Entry] = [
    "LOC_ENG_MSG_REQUEST_PHONE_CONTEXT",
    "LOC_ENG_MSG_REQUEST_NETWORK_POSITION",
    ("ULP_MSG_UPDATE_CRITERIA", 0x600),
    "ULP_MSG_START_FIX",
    "ULP_MSG_STOP_FIX",
    "ULP_MSG_INJECT_PHONE_CONTEXT_SETTINGS",
    "ULP_MSG_INJECT_NETWORK_POSITION",
    "ULP_MSG_REPORT_QUIPC_POSITION",
    "ULP_MSG_REQUEST_COARSE_POSITION",
    "ULP_MSG_MONITOR",
    ("ULP_MSG_LAST", 0x700),
]


def build_message_ids(ulp: bool = False) -> Dict[str, int]:
    """Return the message identifiers, by name, in declaration order.

    With ``ulp`` the identifiers of the unified location provider are
    included, which also shifts the messages declared after them.
    """
    entries: List[_Entry] = list(_ENGINE_MESSAGES)
    if ulp:
        entries += _ULP_MESSAGES
    entries.append("LOC_ENG_MSG_LPP_CONFIG")
    if ulp:
        entries.append("ULP_MSG_INJECT_RAW_COMMAND")
    entries.append("LOC_ENG_MSG_A_GLONASS_PROTOCOL")

    ids: Dict[str, int] = {}
    next_value = 0
    for entry in entries:
        if isinstance(entry, tuple):
            name, next_value = entry
        else:
            name = entry
        ids[name] = next_value
        next_value += 1
    return ids


MESSAGE_IDS: Dict[str, int] = build_message_ids(False)
ULP_MESSAGE_IDS: Dict[str, int] = build_message_ids(True)