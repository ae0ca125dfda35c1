from perfgov.budgets import format_bytes, format_milliseconds
from perfgov.budgets.formatting import ValueKind, format_value


def test_format_bytes_units():
    assert format_bytes(0) == "0 B"
    assert format_bytes(512) == "512 B"
    assert format_bytes(1024) == "1 KB"
    assert format_bytes(600 * 1024) == "600 KB"
    assert format_bytes(1.5 * 1024 * 1024) == "1.5 MB"
    assert format_bytes(3 * 1024 ** 3) == "3 GB"


def test_format_milliseconds_switches_to_seconds():
    assert format_milliseconds(250) == "250.00ms"
    assert format_milliseconds(999.5) == "999.50ms"
    assert format_milliseconds(2500) == "2.50s"


def test_format_value_kinds():
    assert format_value(ValueKind.PERCENT, 72.34) == "72.3%"
    assert format_value(ValueKind.RATIO, 0.1) == "0.100"
    assert format_value(ValueKind.RATE, 1200) == "1200 KB/s"
    assert format_value(ValueKind.COUNT, 1600) == "1600"
    assert format_value(ValueKind.COUNT, 30.0) == "30"
