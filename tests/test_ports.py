import pytest

from portscan.models import PortRange
from portscan.ports import InvalidSpecification, ParseError, RangeSpecError, parse_range, parse_ranges


def test_single_port_is_one_wide():
    assert parse_range("80") == PortRange(80, 81)
    assert parse_range("0") == PortRange(0, 1)
    assert parse_range("65535") == PortRange(65535, 65536)


def test_pair_is_taken_verbatim():
    assert parse_range("1000-2000") == PortRange(1000, 2000)
    # no ordering or emptiness check
    assert parse_range("9000-10") == PortRange(9000, 10)
    assert parse_range("5-5") == PortRange(5, 5)


def test_multiple_tokens_keep_input_order():
    assert parse_ranges("443,80,8000-8100") == [
        PortRange(443, 444),
        PortRange(80, 81),
        PortRange(8000, 8100),
    ]


def test_whitespace_around_tokens_is_ignored():
    assert parse_ranges(" 22 , 80-90 ") == [PortRange(22, 23), PortRange(80, 90)]


@pytest.mark.parametrize("spec", ["abc", "65536", "80-70000", "+80", "1_000", "8 0", "-5", "5-", "1-2-3", "٣"])
def test_bad_numbers_raise_parse_error(spec):
    with pytest.raises(ParseError):
        parse_ranges(spec)


def test_parse_error_names_the_token():
    with pytest.raises(ParseError) as ei:
        parse_ranges("22,80-abc")
    assert ei.value.token == "80-abc"
    assert ei.value.piece == "abc"
    assert "80-abc" in str(ei.value)


def test_one_bad_token_fails_whole_spec():
    with pytest.raises(RangeSpecError):
        parse_ranges("22,80,http")


@pytest.mark.parametrize("spec", ["", "80,", ",80", "22,,80"])
def test_empty_token_is_invalid_specification(spec):
    with pytest.raises(InvalidSpecification):
        parse_ranges(spec)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_range("x")


def test_port_range_helpers():
    pr = PortRange(9001, 9004)
    assert len(pr) == 3
    assert list(pr.ports()) == [9001, 9002, 9003]
    assert str(pr) == "[9001,9004)"
    assert not pr.is_empty

    inverted = PortRange(10, 5)
    assert inverted.is_empty
    assert len(inverted) == 0
    assert list(inverted.ports()) == []
