"""
Unit tests for line and field validators.
"""
import pytest

from core.exceptions import FormatError, ValidationError
from core.schema import PartyReference
from core.validators import is_digits, parse_digits, parse_party_reference, strip_prefix


@pytest.mark.parametrize("value", ["0", "7", "0042", "99999999999999999999999"])
def test_is_digits_accepts(value):
    assert is_digits(value)


@pytest.mark.parametrize("value", ["", " 1", "1 ", "+1", "-1", "1.0", "1_000", "1e3", "²", "١٢", "12\n"])
def test_is_digits_rejects(value):
    assert not is_digits(value)


def test_parse_digits_large_value():
    """Test values beyond 64 bits are kept exact."""
    assert parse_digits("123456789012345678901234567890", "amount") == 123456789012345678901234567890


def test_parse_digits_error_details():
    """Test the error names the field and value."""
    with pytest.raises(ValidationError) as exc_info:
        parse_digits("12a", "amount")

    assert exc_info.value.details["field"] == "amount"
    assert exc_info.value.details["value"] == "12a"
    assert exc_info.value.expected == "<digits>"
    assert exc_info.value.line_number is None


def test_strip_prefix():
    assert strip_prefix("Amount: 10", "Amount: ", "bad") == "10"
    assert strip_prefix("Amount: ", "Amount: ", "bad") == ""


def test_strip_prefix_mismatch():
    """Test a missing prefix raises FormatError with the expected form."""
    with pytest.raises(FormatError) as exc_info:
        strip_prefix("amount: 10", "Amount: ", "Expected a valid amount line")

    assert exc_info.value.message == "Expected a valid amount line"
    assert exc_info.value.expected == "Amount: ..."


def test_strip_prefix_custom_expected():
    with pytest.raises(FormatError) as exc_info:
        strip_prefix("x", "Type: ", "bad", expected="Type: Credit|Debit")
    assert exc_info.value.details["expected"] == "Type: Credit|Debit"


def test_parse_party_reference():
    assert parse_party_reference("111222333 / 9991", "originator") == PartyReference(
        routing_number=111222333, account_number=9991
    )


@pytest.mark.parametrize("value, bad_field", [
    ("abc / 1", "originator.routing_number"),
    ("1 / abc", "originator.account_number"),
    ("1", "originator.account_number"),
    ("1/2", "originator.routing_number"),
    (" / 2", "originator.routing_number"),
])
def test_parse_party_reference_errors(value, bad_field):
    """Test each half of a reference is digit-checked."""
    with pytest.raises(ValidationError) as exc_info:
        parse_party_reference(value, "originator")
    assert exc_info.value.details["field"] == bad_field
