from functools import reduce

import pytest

from m7support.nmea import (
    ExtendedFlags,
    Location,
    LocationExtended,
    LocationFlags,
    NmeaGenerator,
    SvInfo,
    SvStatus,
    put_checksum,
)


def _body(sentence):
    return sentence.split("*")[0]


def _fields(sentence):
    return _body(sentence).split(",")


def _checksum_ok(sentence):
    body, tail = sentence.split("*")
    value = reduce(lambda acc, ch: acc ^ ord(ch), body[1:], 0)
    return int(tail.strip(), 16) == value


@pytest.fixture
def recorded():
    return []


@pytest.fixture
def generator(recorded):
    return NmeaGenerator(
        callback=lambda now, text, length: recorded.append((now, text, length)),
        clock=lambda: 1.5,
    )


def test_put_checksum_standard_example():
    sentence = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,"
    assert put_checksum(sentence) == sentence + "*47\r\n"


def test_put_checksum_keeps_sentence_and_appends_five_chars():
    sentence = "$GPVTG,,T,,M,,N,,K,N"
    result = put_checksum(sentence)
    assert result.startswith(sentence)
    assert len(result) == len(sentence) + 5
    assert result.endswith("\r\n")
    assert _checksum_ok(result)


def test_sv_report_without_satellites_sends_blank_sentences(generator):
    sent = generator.generate_sv(SvStatus())
    assert [_body(s) for s in sent] == [
        "$GPGSV,1,1,0,",
        "$GPGSA,A,1,,,,,,,,,,,,,,,",
        "$GPVTG,,T,,M,,N,,K,N",
        "$GPRMC,,V,,,,,,,,,,N",
        "$GPGGA,,,,,,0,,,,,,,,",
    ]
    assert all(_checksum_ok(s) for s in sent)


def test_sv_report_splits_into_groups_of_four(generator):
    svs = [SvInfo(prn=i, snr=20.0 + i, elevation=10.0, azimuth=100.0) for i in range(1, 6)]
    sent = generator.generate_sv(SvStatus(svs, used_in_fix_mask=0b11))
    assert len(sent) == 2
    first, second = _fields(sent[0]), _fields(sent[1])
    assert first[:4] == ["$GPGSV", "2", "1", "05"]
    assert second[:4] == ["$GPGSV", "2", "2", "05"]
    assert len(first) == 4 + 4 * 4
    assert len(second) == 4 + 4
    assert generator.sv_used_mask == 0b11


def test_sv_values_are_rounded(generator):
    sv = SvInfo(prn=7, snr=30.4, elevation=45.6, azimuth=89.5)
    sent = generator.generate_sv(SvStatus([sv], used_in_fix_mask=1))
    assert _body(sent[0]) == "$GPGSV,1,1,01,07,46,090,30"


def test_sv_without_snr_leaves_field_empty(generator):
    svs = [SvInfo(prn=3, snr=0.0), SvInfo(prn=4, snr=0.0)]
    sent = generator.generate_sv(SvStatus(svs, used_in_fix_mask=1))
    fields = _fields(sent[0])
    assert fields[4] == "03"
    assert fields[7] == ""
    assert fields[8] == "04"


def test_used_mask_fills_gsa_and_is_cleared(generator):
    mask = (1 << 0) | (1 << 2) | (1 << 4) | (1 << 6)
    generator.generate_sv(SvStatus([SvInfo(prn=1)], used_in_fix_mask=mask))
    sent = generator.generate_pos(Location())
    gsa = _fields(sent[0])
    assert gsa[:3] == ["$GPGSA", "A", "3"]
    assert gsa[3:7] == ["01", "03", "05", "07"]
    assert gsa[7:15] == [""] * 8
    assert generator.sv_used_mask == 0
    again = generator.generate_pos(Location())
    assert _fields(again[0])[2] == "1"


def test_generate_pos_sends_four_sentences(generator, recorded):
    sent = generator.generate_pos(Location())
    assert [_fields(s)[0] for s in sent] == ["$GPGSA", "$GPVTG", "$GPRMC", "$GPGGA"]
    assert [text for _, text, _ in recorded] == sent
    assert all(length == len(text) - 1 for _, text, length in recorded)
    assert all(now == 1500 for now, _, _ in recorded)


def test_epoch_time_and_date(generator):
    sent = generator.generate_pos(Location(timestamp=0))
    rmc = _fields(sent[2])
    assert rmc[1] == "000000"
    assert rmc[9] == "010170"
    assert _fields(sent[3])[1] == "000000"


def test_no_fix_fields(generator):
    sent = generator.generate_pos(Location())
    assert _body(sent[1]).endswith(",N")
    rmc = _fields(sent[2])
    assert rmc[3:7] == ["", "", "", ""]
    assert rmc[-1] == "N"
    assert _fields(sent[3])[6] == "0"


def test_coordinates_round_trip(generator):
    location = Location(
        flags=LocationFlags.HAS_LAT_LONG, latitude=37.5, longitude=-122.25
    )
    rmc = _fields(generator.generate_pos(location)[2])
    lat = int(rmc[3][:2]) + float(rmc[3][2:]) / 60.0
    lon = int(rmc[5][:3]) + float(rmc[5][3:]) / 60.0
    assert rmc[4] == "N" and rmc[6] == "W"
    assert lat == pytest.approx(37.5, abs=1e-6)
    assert lon == pytest.approx(122.25, abs=1e-6)


def test_southern_hemisphere(generator):
    location = Location(flags=LocationFlags.HAS_LAT_LONG, latitude=-33.75, longitude=151.5)
    gga = _fields(generator.generate_pos(location)[3])
    assert gga[3] == "S" and gga[5] == "E"
    assert int(gga[2][:2]) + float(gga[2][2:]) / 60.0 == pytest.approx(33.75, abs=1e-6)


@pytest.mark.parametrize("standalone, mode, quality", [(True, "A", "1"), (False, "D", "2")])
def test_position_mode(recorded, standalone, mode, quality):
    gen = NmeaGenerator(standalone=standalone)
    location = Location(flags=LocationFlags.HAS_LAT_LONG, latitude=1.0, longitude=1.0)
    sent = gen.generate_pos(location)
    assert _fields(sent[1])[-1] == mode
    assert _fields(sent[2])[-1] == mode
    assert _fields(sent[3])[6] == quality


def test_speed_and_bearing(generator):
    location = Location(
        flags=LocationFlags.HAS_SPEED | LocationFlags.HAS_BEARING,
        speed=10.0,
        bearing=90.0,
    )
    vtg = _fields(generator.generate_pos(location)[1])
    assert vtg[1:5] == ["90.0", "T", "90.0", "M"]
    assert vtg[6] == "N" and vtg[8] == "K"
    assert float(vtg[7]) == pytest.approx(10.0 * 3.6, abs=0.05)
    assert float(vtg[5]) == pytest.approx(10.0 * 3600.0 / 1852.0, abs=0.05)


def test_extended_dop_used_in_gsa_and_gga(generator):
    extended = LocationExtended(flags=ExtendedFlags.HAS_DOP, pdop=2.0, hdop=1.5, vdop=1.75)
    sent = generator.generate_pos(Location(), extended)
    assert _fields(sent[0])[-3:] == ["2.0", "1.5", f"{1.75:.1f}"]
    assert _fields(sent[3])[8] == "1.5"


def test_dop_cached_from_sv_report_then_cleared(generator):
    extended = LocationExtended(flags=ExtendedFlags.HAS_DOP, pdop=2.0, hdop=1.5, vdop=2.5)
    generator.generate_sv(SvStatus([SvInfo(prn=1)], used_in_fix_mask=1), extended)
    first = generator.generate_pos(Location())
    assert _fields(first[0])[-3:] == ["2.0", "1.5", "2.5"]
    assert (generator.pdop, generator.hdop, generator.vdop) == (0.0, 0.0, 0.0)
    second = generator.generate_pos(Location())
    assert _fields(second[0])[-3:] == ["", "", ""]


def test_magnetic_variation_west(generator):
    extended = LocationExtended(flags=ExtendedFlags.HAS_MAG_DEV, magnetic_deviation=-4.5)
    rmc = _fields(generator.generate_pos(Location(), extended)[2])
    assert rmc[10:12] == ["4.5", "W"]


def test_altitude_above_geoid(generator):
    location = Location(flags=LocationFlags.HAS_ALTITUDE, altitude=100.5)
    extended = LocationExtended(
        flags=ExtendedFlags.HAS_ALTITUDE_MEAN_SEA_LEVEL, altitude_mean_sea_level=60.25
    )
    gga = _fields(generator.generate_pos(location, extended)[3])
    assert float(gga[9]) == pytest.approx(60.25, abs=0.05)
    assert gga[10] == "M"
    assert float(gga[11]) == pytest.approx(100.5 - 60.25, abs=0.05)


def test_every_sentence_has_valid_checksum(generator):
    location = Location(
        flags=LocationFlags.HAS_LAT_LONG | LocationFlags.HAS_SPEED,
        latitude=10.0,
        longitude=20.0,
        speed=3.0,
        timestamp=1_000_000_000_000,
    )
    sent = generator.generate_pos(location)
    assert len(sent) == 4
    assert all(_checksum_ok(s) for s in sent)