import json

import pytest

from qr_attendance.parsing.model import Identity
from qr_attendance.parsing.parser import PayloadParser, parse_payload
from qr_attendance.parsing.strategies.structured import StructuredStrategy
from qr_attendance.parsing.strategies.three_part import ThreePartCommaStrategy
from qr_attendance.parsing.strategies.two_part import TwoPartCommaStrategy


def test_three_part_badge_format():
    assert parse_payload("SMITH, John, USA") == Identity(name="SMITH, John", country="USA")


def test_three_part_trims_every_segment():
    assert parse_payload("  DOE ,   John  ,  United States  ") == Identity(name="DOE, John", country="United States")


def test_three_part_keeps_extra_commas_in_country():
    assert parse_payload("DOE, John, Korea, Republic of") == Identity(name="DOE, John", country="Korea, Republic of")


def test_three_part_wins_over_two_part():
    payload = "DOE, John, USA"
    assert TwoPartCommaStrategy().try_parse(payload) == Identity(name="DOE", country="John, USA")
    assert parse_payload(payload) == Identity(name="DOE, John", country="USA")


def test_labeled_format_is_case_insensitive():
    assert parse_payload("Name: Jane Roe, Country: Canada") == Identity(name="Jane Roe", country="Canada")
    assert parse_payload("NAME:Jane Roe,country:  Canada ") == Identity(name="Jane Roe", country="Canada")


def test_two_part_format():
    assert parse_payload("Jane Roe, Canada") == Identity(name="Jane Roe", country="Canada")


def test_structured_name_and_country():
    payload = json.dumps({"name": " Jane Roe ", "country": "Canada"}, indent=2)
    assert parse_payload(payload) == Identity(name="Jane Roe", country="Canada")


def test_structured_last_and_first_name():
    payload = json.dumps({"lastName": "DOE", "firstName": "John", "country": "USA"}, indent=2)
    assert parse_payload(payload) == Identity(name="DOE, John", country="USA")


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[1, 2, 3]",
        "null",
        '{"name": 42, "country": "USA"}',
        '{"name": "Jane"}',
        '{"lastName": "DOE", "country": "USA"}',
    ],
)
def test_structured_misses_without_raising(payload):
    assert StructuredStrategy().try_parse(payload) is None


def test_multiline_three_lines():
    assert parse_payload("DOE\nJohn\nUSA") == Identity(name="DOE, John", country="USA")


def test_multiline_two_lines_with_blank_lines_and_crlf():
    assert parse_payload("\r\nJane Roe\r\n\r\n  Canada  \r\n") == Identity(name="Jane Roe", country="Canada")


def test_multiline_needs_exactly_two_or_three_lines():
    assert parse_payload("A\nB\nC\nD") == Identity.EMPTY


@pytest.mark.parametrize("payload", ["", "   ", "JUSTONEWORD", "https://example.com/ticket/123", "{", "\x00\x01"])
def test_unmatched_payload_returns_empty_identity(payload):
    identity = parse_payload(payload)
    assert identity == Identity.EMPTY
    assert not identity.is_complete


def test_single_line_three_part_does_not_span_lines():
    # A newline inside the country segment breaks the one-line comma forms.
    assert ThreePartCommaStrategy().try_parse("DOE, John, US\nA") is None


def test_custom_strategy_order_is_respected():
    parser = PayloadParser(strategies=[TwoPartCommaStrategy(), ThreePartCommaStrategy()])
    assert parser.parse("DOE, John, USA") == Identity(name="DOE", country="John, USA")
