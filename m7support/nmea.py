"""NMEA 0183 sentences built from position and satellite reports."""

from __future__ import annotations

import enum
import math
import struct
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .loc_log import loc_logger

NMEA_SENTENCE_MAX_LENGTH = 200

NmeaCallback = Callable[[int, str, int], object]


class LocationFlags(enum.IntFlag):
    """Which fields of a :class:`Location` are valid."""

    HAS_LAT_LONG = 0x0001
    HAS_ALTITUDE = 0x0002
    HAS_SPEED = 0x0004
    HAS_BEARING = 0x0008
    HAS_ACCURACY = 0x0010


class ExtendedFlags(enum.IntFlag):
    """Which fields of a :class:`LocationExtended` are valid."""

    HAS_ALTITUDE_MEAN_SEA_LEVEL = 0x0001
    HAS_DOP = 0x0002
    HAS_MAG_DEV = 0x0004


@dataclass
class Location:
    """A position fix; ``timestamp`` is in milliseconds since the epoch."""

    flags: LocationFlags = LocationFlags(0)
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    speed: float = 0.0
    bearing: float = 0.0
    accuracy: float = 0.0
    timestamp: int = 0


@dataclass
class LocationExtended:
    """Extra data reported alongside a fix."""

    flags: ExtendedFlags = ExtendedFlags(0)
    altitude_mean_sea_level: float = 0.0
    pdop: float = 0.0
    hdop: float = 0.0
    vdop: float = 0.0
    magnetic_deviation: float = 0.0


@dataclass
class SvInfo:
    """One satellite in view."""

    prn: int
    snr: float = 0.0
    elevation: float = 0.0
    azimuth: float = 0.0


@dataclass
class SvStatus:
    """The satellites in view and which of them were used in the fix."""

    sv_list: Sequence[SvInfo] = field(default_factory=list)
    used_in_fix_mask: int = 0

    @property
    def num_svs(self) -> int:
        """Number of satellites in view."""
        return len(self.sv_list)


class _Overflow(Exception):
    pass


def _f32(value: float) -> float:
    """Round ``value`` to single precision."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _c_int(value: float) -> int:
    """Truncate toward zero; non-finite values give zero."""
    return int(value) if math.isfinite(value) else 0


def _u8_floor(value: float) -> int:
    return (int(math.floor(value)) & 0xFF) if math.isfinite(value) else 0


class _Sentence:
    """A sentence under construction, bounded like a fixed buffer."""

    def __init__(self, start: str = "") -> None:
        self.text = ""
        if start:
            self.add(start)

    def add(self, part: str) -> None:
        if len(part) >= NMEA_SENTENCE_MAX_LENGTH - len(self.text):
            raise _Overflow
        self.text += part

    def add_unchecked(self, part: str) -> None:
        room = NMEA_SENTENCE_MAX_LENGTH - len(self.text) - 1
        self.text += part[: max(room, 0)]


def put_checksum(sentence: str) -> str:
    """Append ``*HH\\r\\n``, the XOR of every character after the first."""
    checksum = 0
    for char in sentence[1:]:
        checksum ^= ord(char) & 0xFF
    return f"{sentence}*{checksum:02X}\r\n"


def _lat_lon(location: Location) -> str:
    latitude = location.latitude
    longitude = location.longitude
    if latitude > 0:
        lat_hemisphere = "N"
    else:
        lat_hemisphere = "S"
        latitude = -latitude
    if longitude < 0:
        lon_hemisphere = "W"
        longitude = -longitude
    else:
        lon_hemisphere = "E"
    lat_minutes = math.fmod(latitude * 60.0, 60.0)
    lon_minutes = math.fmod(longitude * 60.0, 60.0)
    return (
        f"{_u8_floor(latitude):02d}{lat_minutes:09.6f},{lat_hemisphere},"
        f"{_u8_floor(longitude):03d}{lon_minutes:09.6f},{lon_hemisphere},"
    )


class NmeaGenerator:
    """Builds NMEA sentences and hands each one to ``callback``.

    ``callback`` is called with the time in milliseconds, the sentence and
    its length less the leading ``$``. ``standalone`` tells whether the
    engine runs in standalone (autonomous) position mode. The generator
    keeps the satellites used and the DOP values of the last satellite
    report for the next position report.
    """

    def __init__(
        self,
        callback: Optional[NmeaCallback] = None,
        standalone: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.callback = callback
        self.standalone = standalone
        self._clock = clock
        self.sv_used_mask = 0
        self.pdop = 0.0
        self.hdop = 0.0
        self.vdop = 0.0

    def _send(self, sentence: str, sent: List[str]) -> None:
        full = put_checksum(sentence)
        now = int(self._clock() * 1000)
        if self.callback is not None:
            self.callback(now, full, len(full) - 1)
        loc_logger.debug(f"NMEA <{full}")
        sent.append(full)

    def _mode(self, location: Location) -> str:
        if not location.flags & LocationFlags.HAS_LAT_LONG:
            return "N"
        return "A" if self.standalone else "D"

    def _has_cached_dop(self) -> bool:
        return self.pdop > 0 and self.hdop > 0 and self.vdop > 0

    def generate_pos(
        self, location: Location, extended: Optional[LocationExtended] = None
    ) -> List[str]:
        """Send GSA, VTG, RMC and GGA sentences for a fix; return them."""
        sent: List[str] = []
        try:
            self._generate_pos(location, extended or LocationExtended(), sent)
        except _Overflow:
            loc_logger.error("NMEA Error in string formatting")
        return sent

    def _generate_pos(
        self, location: Location, extended: LocationExtended, sent: List[str]
    ) -> None:
        utc = time.gmtime(location.timestamp // 1000)
        hms = f"{utc.tm_hour:02d}{utc.tm_min:02d}{utc.tm_sec:02d}"
        flags = location.flags
        ext_flags = extended.flags
        has_fix = bool(flags & LocationFlags.HAS_LAT_LONG)
        bearing = _f32(location.bearing)
        speed = _f32(location.speed)

        # $GPGSA
        used: List[int] = []
        mask = self.sv_used_mask & 0xFFFFFFFF
        prn = 1
        while mask > 0 and len(used) < 32:
            if mask & 1:
                used.append(prn)
            mask >>= 1
            prn += 1
        self.sv_used_mask = 0

        if not used:
            fix_type = "1"
        elif len(used) <= 3:
            fix_type = "2"
        else:
            fix_type = "3"

        gsa = _Sentence(f"$GPGSA,A,{fix_type},")
        for index in range(12):
            gsa.add(f"{used[index]:02d}," if index < len(used) else ",")
        if ext_flags & ExtendedFlags.HAS_DOP:
            gsa.add_unchecked(
                f"{_f32(extended.pdop):.1f},{_f32(extended.hdop):.1f},{_f32(extended.vdop):.1f}"
            )
        elif self._has_cached_dop():
            gsa.add_unchecked(f"{self.pdop:.1f},{self.hdop:.1f},{self.vdop:.1f}")
        else:
            gsa.add_unchecked(",,")
        self._send(gsa.text, sent)

        # $GPVTG
        if flags & LocationFlags.HAS_BEARING:
            vtg = _Sentence(f"$GPVTG,{bearing:.1f},T,{bearing:.1f},M,")
        else:
            vtg = _Sentence("$GPVTG,,T,,M,")
        if flags & LocationFlags.HAS_SPEED:
            knots = _f32(speed * (3600.0 / 1852.0))
            km_per_hour = _f32(speed * 3.6)
            vtg.add(f"{knots:.1f},N,{km_per_hour:.1f},K,")
        else:
            vtg.add(",N,,K,")
        vtg.add_unchecked(self._mode(location))
        self._send(vtg.text, sent)

        # $GPRMC
        rmc = _Sentence(f"$GPRMC,{hms},A,")
        rmc.add(_lat_lon(location) if has_fix else ",,,,")
        if flags & LocationFlags.HAS_SPEED:
            rmc.add(f"{_f32(speed * (3600.0 / 1852.0)):.1f},")
        else:
            rmc.add(",")
        rmc.add(f"{bearing:.1f}," if flags & LocationFlags.HAS_BEARING else ",")
        rmc.add(f"{utc.tm_mday:02d}{utc.tm_mon:02d}{utc.tm_year % 100:02d},")
        if ext_flags & ExtendedFlags.HAS_MAG_DEV:
            variation = _f32(extended.magnetic_deviation)
            if variation < 0.0:
                direction = "W"
                variation = -variation
            else:
                direction = "E"
            rmc.add(f"{variation:.1f},{direction},")
        else:
            rmc.add(",,")
        rmc.add_unchecked(self._mode(location))
        self._send(rmc.text, sent)

        # $GPGGA
        gga = _Sentence(f"$GPGGA,{hms},")
        gga.add(_lat_lon(location) if has_fix else ",,,,")
        if not has_fix:
            quality = "0"
        elif self.standalone:
            quality = "1"
        else:
            quality = "2"
        if ext_flags & ExtendedFlags.HAS_DOP:
            gga.add(f"{quality},{len(used):02d},{_f32(extended.hdop):.1f},")
        elif self._has_cached_dop():
            gga.add(f"{quality},{len(used):02d},{self.hdop:.1f},")
        else:
            gga.add(f"{quality},{len(used):02d},,")
        has_msl = bool(ext_flags & ExtendedFlags.HAS_ALTITUDE_MEAN_SEA_LEVEL)
        msl = _f32(extended.altitude_mean_sea_level)
        gga.add(f"{msl:.1f},M," if has_msl else ",,")
        if flags & LocationFlags.HAS_ALTITUDE and has_msl:
            gga.add_unchecked(f"{location.altitude - msl:.1f},M,,")
        else:
            gga.add_unchecked(",,,")
        self._send(gga.text, sent)

        self.pdop = 0.0
        self.hdop = 0.0
        self.vdop = 0.0

    def generate_sv(
        self, sv_status: SvStatus, extended: Optional[LocationExtended] = None
    ) -> List[str]:
        """Send GSV sentences for the satellites in view; return all sent.

        With no satellite used in a fix, blank GSA, VTG, RMC and GGA
        sentences follow; otherwise the used mask and DOP values are kept
        for the next position report.
        """
        extended = extended or LocationExtended()
        sent: List[str] = []
        try:
            self._generate_gsv(sv_status, sent)
        except _Overflow:
            loc_logger.error("NMEA Error in string formatting")
            return sent

        if sv_status.used_in_fix_mask == 0:
            for blank in (
                "$GPGSA,A,1,,,,,,,,,,,,,,,",
                "$GPVTG,,T,,M,,N,,K,N",
                "$GPRMC,,V,,,,,,,,,,N",
                "$GPGGA,,,,,,0,,,,,,,,",
            ):
                self._send(blank, sent)
        else:
            self.sv_used_mask = sv_status.used_in_fix_mask & 0xFFFFFFFF
            if extended.flags & ExtendedFlags.HAS_DOP:
                self.pdop = _f32(extended.pdop)
                self.hdop = _f32(extended.hdop)
                self.vdop = _f32(extended.vdop)
            else:
                self.pdop = 0.0
                self.hdop = 0.0
                self.vdop = 0.0
        return sent

    def _generate_gsv(self, sv_status: SvStatus, sent: List[str]) -> None:
        sv_count = sv_status.num_svs
        if sv_count <= 0:
            self._send("$GPGSV,1,1,0,", sent)
            return

        sentence_count = -(-sv_count // 4)
        satellites = list(sv_status.sv_list)
        for number in range(1, sentence_count + 1):
            gsv = _Sentence(f"$GPGSV,{sentence_count},{number},{sv_count:02d}")
            for sv in satellites[(number - 1) * 4 : number * 4]:
                elevation = _c_int(0.5 + _f32(sv.elevation))
                azimuth = _c_int(0.5 + _f32(sv.azimuth))
                gsv.add(f",{sv.prn:02d},{elevation:02d},{azimuth:03d},")
                snr = _f32(sv.snr)
                if snr > 0:
                    gsv.add(f"{_c_int(0.5 + snr):02d}")
            self._send(gsv.text, sent)