"""
Line and field validators shared by the batch parser.

Every numeric field of a batch file (batch id, routing number, account
number, transaction number, amount) must be a plain run of ASCII digits:
no sign, no decimal point, no separators, no whitespace.
"""
import re
from typing import Optional

from core.exceptions import FormatError, ValidationError
from core.schema import PartyReference

DIGITS_PATTERN = re.compile(r"[0-9]+")

PARTY_SEPARATOR = " / "

NOT_DIGITS_MESSAGE = "Expected input to be a sequence of digits, but it was not"


def is_digits(value: str) -> bool:
    """
    Check whether a string is a non-empty run of ASCII digits.

    Args:
        value: String to check

    Returns:
        True if every character is 0-9, False otherwise
    """
    return DIGITS_PATTERN.fullmatch(value) is not None


def parse_digits(value: str, field: str) -> int:
    """
    Parse an all-digit field into a non-negative integer.

    Args:
        value: Raw field value
        field: Field name, for error details

    Returns:
        Parsed integer

    Raises:
        ValidationError: If the value is not a sequence of digits
    """
    if not is_digits(value):
        raise ValidationError(
            NOT_DIGITS_MESSAGE,
            expected="<digits>",
            details={"field": field, "value": value}
        )
    return int(value)


def strip_prefix(
    line: str,
    prefix: str,
    message: str,
    expected: Optional[str] = None
) -> str:
    """
    Remove a required line prefix and return the remainder.

    Args:
        line: Input line
        prefix: Literal prefix the line must start with, e.g. "Amount: "
        message: Error message if the prefix is missing
        expected: Human-readable form of the expected line (defaults to the prefix)

    Returns:
        The text after the prefix (possibly empty)

    Raises:
        FormatError: If the line does not start with the prefix
    """
    if not line.startswith(prefix):
        raise FormatError(message, expected=expected or f"{prefix}...")
    return line[len(prefix):]


def parse_party_reference(value: str, field: str) -> PartyReference:
    """
    Parse a "<routing> / <account>" payload.

    The payload is split on the first separator. A payload without a
    separator fails the digit check on its missing account part.

    Args:
        value: Raw payload, e.g. "111222333 / 9991"
        field: Field name ("originator" or "recipient"), for error details

    Returns:
        PartyReference for the pair

    Raises:
        ValidationError: If either part is not a sequence of digits
    """
    routing, _, account = value.partition(PARTY_SEPARATOR)
    return PartyReference(
        routing_number=parse_digits(routing, f"{field}.routing_number"),
        account_number=parse_digits(account, f"{field}.account_number"),
    )
