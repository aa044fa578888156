"""
Shared fixtures for batch ledger tests.
"""
import pytest

from core.config import reset_settings

HEADER = """\
/* Files */
Batch: 99
Description: Payroll for January
"""

SIMPLE_BATCH = HEADER + """\
==
Transaction: 301
Originator: 111222333 / 9991
Recipient: 444555666 / 123456
Type: Credit
Amount: 10000
"""

COMMENTED_BATCH = SIMPLE_BATCH + """\
==
Comment: Payment for invoice 100
Transaction: 302
Originator: 111222333 / 9991
Recipient: 123456789 / 55550
Type: Credit
Amount: 380100
==
"""

DEBIT_BATCH = SIMPLE_BATCH + """\
==
Comment: Payment for invoice 100
Transaction: 302
Originator: 111222333 / 9991
Recipient: 123456789 / 55550
Type: Credit
Amount: 380100
==
Transaction: 305
Originator: 111222333 / 9992
Recipient: 444555666 / 8675309
Type: Debit
Amount: 999
"""


def to_lines(text: str) -> list:
    """Split a test document into lines."""
    return text.splitlines()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def simple_lines():
    return to_lines(SIMPLE_BATCH)


@pytest.fixture
def commented_lines():
    return to_lines(COMMENTED_BATCH)


@pytest.fixture
def debit_lines():
    return to_lines(DEBIT_BATCH)


@pytest.fixture
def batch_file(tmp_path):
    """Write the debit batch to disk and return its path."""
    path = tmp_path / "batch.txt"
    path.write_text(DEBIT_BATCH, encoding="utf-8")
    return path
