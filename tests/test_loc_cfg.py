import pytest

from m7support.loc_cfg import (
    LOC_MAX_PARAM_STRING,
    ConfigParam,
    ConfigValue,
    ParamType,
    loc_parameters,
    parse_value,
    read_conf,
    trim_space,
)
from m7support.loc_log import loc_logger


@pytest.fixture(autouse=True)
def restore_logger():
    saved = (loc_logger.debug_level, loc_logger.timestamp)
    yield
    loc_logger.init(*saved)


def write_conf(tmp_path, text):
    path = tmp_path / "gps.conf"
    path.write_text(text, encoding="latin-1")
    return path


def test_trim_space_strips_both_ends():
    assert trim_space("  abc def \t\n") == "abc def"


def test_trim_space_all_space_unchanged():
    assert trim_space("   ") == "   "


def test_parse_value_decimal():
    value = parse_value("X", "42")
    assert value.int_value == 42
    assert value.double_value == 42.0
    assert value.str_value == "42"


def test_parse_value_float_prefix():
    value = parse_value("X", "3.5abc")
    assert value.int_value == 3
    assert value.double_value == 3.5


def test_parse_value_hex_leaves_double_zero():
    value = parse_value("X", "0x10")
    assert value.int_value == 16
    assert value.double_value == 0.0


def test_parse_value_text_is_zero():
    value = parse_value("X", "abc")
    assert (value.int_value, value.double_value) == (0, 0.0)


def test_apply_name_mismatch():
    param = ConfigParam("A", ParamType.NUMBER, 7)
    assert param.apply(ConfigValue("B", "1", 1, 1.0)) is False
    assert param.value == 7
    assert param.is_set is False


def test_apply_string_null_and_truncate():
    param = ConfigParam("S", "s")
    assert param.apply(ConfigValue("S", "NULL")) is True
    assert param.value == ""
    param.apply(ConfigValue("S", "z" * 200))
    assert len(param.value) == LOC_MAX_PARAM_STRING
    assert param.is_set is True


def test_apply_float():
    param = ConfigParam("F", ParamType.FLOAT)
    param.apply(parse_value("F", "2.25"))
    assert param.value == 2.25


def test_invalid_param_type():
    with pytest.raises(ValueError):
        ConfigParam("A", "q")


def test_read_conf_sets_table(tmp_path):
    path = write_conf(
        tmp_path,
        "# comment without equals\nNUM = 0x20\nNAME= hello world \nRATE=1.5\nA==5\n",
    )
    num = ConfigParam("NUM", ParamType.NUMBER)
    name = ConfigParam("NAME", ParamType.STRING)
    rate = ConfigParam("RATE", ParamType.FLOAT)
    a = ConfigParam("A", ParamType.NUMBER)
    missing = ConfigParam("MISSING", ParamType.NUMBER, is_set=True)
    assert read_conf(path, [num, name, rate, a, missing]) is True
    assert num.value == 32
    assert name.value == "hello world"
    assert rate.value == 1.5
    assert a.value == 5
    assert missing.is_set is False
    assert all(p.is_set for p in (num, name, rate, a))


def test_read_conf_missing_file(tmp_path):
    param = ConfigParam("X", ParamType.NUMBER, is_set=True)
    loc_logger.init(9, 1)
    assert read_conf(tmp_path / "absent.conf", [param]) is False
    assert param.is_set is True
    assert (loc_logger.debug_level, loc_logger.timestamp) == (3, 0)


def test_read_conf_sets_logger(tmp_path):
    path = write_conf(tmp_path, "DEBUG_LEVEL = 5\nTIMESTAMP = 1\n")
    assert read_conf(path) is True
    assert loc_logger.debug_level == 5
    assert loc_logger.timestamp == 1
    names = {p.name: p.value for p in loc_parameters}
    assert names["DEBUG_LEVEL"] == 5
    read_conf(write_conf(tmp_path, "OTHER=1\n"))
    assert loc_logger.debug_level == 3


def test_read_conf_long_line_split(tmp_path):
    line = "PAD=" + "y" * 75 + "B=7\n"
    path = write_conf(tmp_path, line)
    pad = ConfigParam("PAD", ParamType.STRING)
    b = ConfigParam("B", ParamType.NUMBER)
    read_conf(path, [pad, b])
    assert pad.value == "y" * 75
    assert b.value == 7


def test_read_conf_third_operand_ignored(tmp_path):
    path = write_conf(tmp_path, "K=1=2\n")
    k = ConfigParam("K", ParamType.STRING)
    read_conf(path, [k])
    assert k.value == "1"