"""
Batch file parsing: a line-driven state machine.

A batch file is a three-line header followed by repeating transaction
groups:

    /* Files */
    Batch: <digits>
    Description: <text>
    ==
    [Comment: <text>]
    Transaction: <digits>
    Originator: <digits> / <digits>
    Recipient: <digits> / <digits>
    Type: Credit|Debit
    Amount: <digits>

Each transaction is applied to the ledger as soon as its Amount line is
read. The first invalid line aborts the parse.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from core.exceptions import BatchLedgerException, FormatError, ParsingError, ValidationError
from core.ledger import Ledger
from core.logger import setup_logger
from core.schema import BatchHeader, ParseResult, PartyReference, TransactionKind, TransactionRecord
from core.validators import parse_digits, parse_party_reference, strip_prefix

logger = setup_logger(__name__)

FILES_MARKER = "/* Files */"
SEPARATOR_MARKER = "=="

BATCH_PREFIX = "Batch: "
DESCRIPTION_PREFIX = "Description: "
COMMENT_PREFIX = "Comment: "
TRANSACTION_PREFIX = "Transaction: "
ORIGINATOR_PREFIX = "Originator: "
RECIPIENT_PREFIX = "Recipient: "
TYPE_PREFIX = "Type: "
AMOUNT_PREFIX = "Amount: "


class ParserState(str, Enum):
    """Position of the parser within the batch grammar."""
    AWAIT_HEADER_0 = "await_header_0"
    AWAIT_HEADER_1 = "await_header_1"
    AWAIT_HEADER_2 = "await_header_2"
    AWAIT_SEPARATOR = "await_separator"
    AWAIT_TRANSACTION_OR_COMMENT = "await_transaction_or_comment"
    AWAIT_ORIGINATOR = "await_originator"
    AWAIT_RECIPIENT = "await_recipient"
    AWAIT_TYPE = "await_type"
    AWAIT_AMOUNT = "await_amount"


# State reached after a line is accepted. A comment line is the only
# exception: it leaves the parser in AWAIT_TRANSACTION_OR_COMMENT.
TRANSITIONS: Dict[ParserState, ParserState] = {
    ParserState.AWAIT_HEADER_0: ParserState.AWAIT_HEADER_1,
    ParserState.AWAIT_HEADER_1: ParserState.AWAIT_HEADER_2,
    ParserState.AWAIT_HEADER_2: ParserState.AWAIT_SEPARATOR,
    ParserState.AWAIT_SEPARATOR: ParserState.AWAIT_TRANSACTION_OR_COMMENT,
    ParserState.AWAIT_TRANSACTION_OR_COMMENT: ParserState.AWAIT_ORIGINATOR,
    ParserState.AWAIT_ORIGINATOR: ParserState.AWAIT_RECIPIENT,
    ParserState.AWAIT_RECIPIENT: ParserState.AWAIT_TYPE,
    ParserState.AWAIT_TYPE: ParserState.AWAIT_AMOUNT,
    ParserState.AWAIT_AMOUNT: ParserState.AWAIT_SEPARATOR,
}

EXPECTED_LINES: Dict[ParserState, str] = {
    ParserState.AWAIT_HEADER_0: FILES_MARKER,
    ParserState.AWAIT_HEADER_1: "Batch: <digits>",
    ParserState.AWAIT_HEADER_2: "Description: <text>",
    ParserState.AWAIT_SEPARATOR: SEPARATOR_MARKER,
    ParserState.AWAIT_TRANSACTION_OR_COMMENT: "Comment: <text> | Transaction: <digits>",
    ParserState.AWAIT_ORIGINATOR: "Originator: <digits> / <digits>",
    ParserState.AWAIT_RECIPIENT: "Recipient: <digits> / <digits>",
    ParserState.AWAIT_TYPE: "Type: Credit|Debit",
    ParserState.AWAIT_AMOUNT: "Amount: <digits>",
}

# States in which end of input leaves a transaction half read
PARTIAL_TRANSACTION_STATES = frozenset({
    ParserState.AWAIT_ORIGINATOR,
    ParserState.AWAIT_RECIPIENT,
    ParserState.AWAIT_TYPE,
    ParserState.AWAIT_AMOUNT,
})

KNOWN_TYPES = frozenset(kind.value for kind in TransactionKind)


@dataclass
class PendingTransaction:
    """Fields of the transaction group currently being read."""
    number: Optional[int] = None
    originator: Optional[PartyReference] = None
    recipient: Optional[PartyReference] = None
    type: Optional[str] = None
    amount: Optional[int] = None

    def complete(self) -> TransactionRecord:
        """Build the finished record once the amount line has been read."""
        return TransactionRecord(
            number=self.number,
            originator=self.originator,
            recipient=self.recipient,
            type=self.type,
            amount=self.amount,
        )


@dataclass
class ParseContext:
    """All mutable state of one parse."""
    state: ParserState = ParserState.AWAIT_HEADER_0
    line_number: int = 0
    batch_id: Optional[int] = None
    header: Optional[BatchHeader] = None
    pending: PendingTransaction = field(default_factory=PendingTransaction)
    ledger: Ledger = field(default_factory=Ledger)
    transaction_count: int = 0
    comment_count: int = 0
    strict_types: bool = False

    @property
    def next_state(self) -> ParserState:
        return TRANSITIONS[self.state]


def _expect_files_marker(ctx: ParseContext, line: str) -> ParserState:
    if line != FILES_MARKER:
        raise FormatError(
            "Expected input to be marked as Files",
            expected=EXPECTED_LINES[ctx.state]
        )
    return ctx.next_state


def _expect_batch(ctx: ParseContext, line: str) -> ParserState:
    value = strip_prefix(
        line, BATCH_PREFIX,
        "Expected a valid batch line",
        expected=EXPECTED_LINES[ctx.state]
    )
    ctx.batch_id = parse_digits(value, "batch")
    return ctx.next_state


def _expect_description(ctx: ParseContext, line: str) -> ParserState:
    description = strip_prefix(
        line, DESCRIPTION_PREFIX,
        "Expected a valid description line",
        expected=EXPECTED_LINES[ctx.state]
    )
    ctx.header = BatchHeader(batch_id=ctx.batch_id, description=description)
    logger.debug(f"Read header for batch {ctx.header.batch_id}: {description!r}")
    return ctx.next_state


def _expect_separator(ctx: ParseContext, line: str) -> ParserState:
    if not line.startswith(SEPARATOR_MARKER):
        raise FormatError(
            "Expected a separator line",
            expected=EXPECTED_LINES[ctx.state]
        )
    return ctx.next_state


def _expect_transaction_or_comment(ctx: ParseContext, line: str) -> ParserState:
    if line.startswith(COMMENT_PREFIX):
        ctx.comment_count += 1
        return ctx.state

    value = strip_prefix(
        line, TRANSACTION_PREFIX,
        "Expected a valid transaction line",
        expected=EXPECTED_LINES[ctx.state]
    )
    ctx.pending = PendingTransaction(number=parse_digits(value, "transaction"))
    return ctx.next_state


def _expect_originator(ctx: ParseContext, line: str) -> ParserState:
    value = strip_prefix(
        line, ORIGINATOR_PREFIX,
        "Expected a valid originator line",
        expected=EXPECTED_LINES[ctx.state]
    )
    party = parse_party_reference(value, "originator")
    ctx.pending.originator = party
    ctx.ledger.touch(party)
    return ctx.next_state


def _expect_recipient(ctx: ParseContext, line: str) -> ParserState:
    value = strip_prefix(
        line, RECIPIENT_PREFIX,
        "Expected a valid recipient line",
        expected=EXPECTED_LINES[ctx.state]
    )
    party = parse_party_reference(value, "recipient")
    ctx.pending.recipient = party
    ctx.ledger.touch(party)
    return ctx.next_state


def _expect_type(ctx: ParseContext, line: str) -> ParserState:
    value = strip_prefix(
        line, TYPE_PREFIX,
        "Expected a valid type line",
        expected=EXPECTED_LINES[ctx.state]
    )
    if value not in KNOWN_TYPES:
        if ctx.strict_types:
            raise ValidationError(
                "Expected transaction type to be Credit or Debit",
                expected=EXPECTED_LINES[ctx.state],
                details={"field": "type", "value": value}
            )
        logger.warning(
            f"Unknown transaction type {value!r} on line {ctx.line_number}, treating as Credit"
        )
    ctx.pending.type = value
    return ctx.next_state


def _expect_amount(ctx: ParseContext, line: str) -> ParserState:
    value = strip_prefix(
        line, AMOUNT_PREFIX,
        "Expected a valid amount line",
        expected=EXPECTED_LINES[ctx.state]
    )
    ctx.pending.amount = parse_digits(value, "amount")

    ctx.ledger.apply(ctx.pending.complete())
    ctx.transaction_count += 1
    ctx.pending = PendingTransaction()
    return ctx.next_state


HANDLERS: Dict[ParserState, Callable[[ParseContext, str], ParserState]] = {
    ParserState.AWAIT_HEADER_0: _expect_files_marker,
    ParserState.AWAIT_HEADER_1: _expect_batch,
    ParserState.AWAIT_HEADER_2: _expect_description,
    ParserState.AWAIT_SEPARATOR: _expect_separator,
    ParserState.AWAIT_TRANSACTION_OR_COMMENT: _expect_transaction_or_comment,
    ParserState.AWAIT_ORIGINATOR: _expect_originator,
    ParserState.AWAIT_RECIPIENT: _expect_recipient,
    ParserState.AWAIT_TYPE: _expect_type,
    ParserState.AWAIT_AMOUNT: _expect_amount,
}


class BatchParser:
    """
    Incremental parser for one batch file.

    Feed lines in order with feed(), then call finish() once at end of
    input to get the ParseResult. A parser is single use: after an error
    or after finish() it refuses further input.
    """

    def __init__(self, strict_types: bool = False):
        """
        Initialize parser.

        Args:
            strict_types: Reject Type values other than Credit/Debit instead
                of treating them as Credit
        """
        self.context = ParseContext(strict_types=strict_types)
        self._failed = False
        self._finished = False

    @property
    def state(self) -> ParserState:
        return self.context.state

    @property
    def line_number(self) -> int:
        """Number of lines accepted so far (0-based index of the next line)."""
        return self.context.line_number

    def _ensure_open(self) -> None:
        if self._failed:
            raise ParsingError(
                "Parser has already failed and cannot accept more input",
                details={"line_number": self.context.line_number}
            )
        if self._finished:
            raise ParsingError("Parser has already finished")

    def feed(self, line: str) -> None:
        """
        Consume one line (without its line terminator).

        Args:
            line: Next input line

        Raises:
            FormatError: If the line does not match the expected structure
            ValidationError: If a field value is invalid
        """
        self._ensure_open()
        ctx = self.context
        handler = HANDLERS[ctx.state]

        try:
            ctx.state = handler(ctx, line)
        except ParsingError as e:
            self._failed = True
            e.at_line(ctx.line_number, line)
            logger.error(f"Line {ctx.line_number}: {e.message} (expected {e.expected})")
            raise
        except BatchLedgerException:
            self._failed = True
            raise

        ctx.line_number += 1

    def feed_all(self, lines: Iterable[str]) -> None:
        """Consume every line of an iterable, in order."""
        for line in lines:
            self.feed(line)

    def finish(self) -> ParseResult:
        """
        Signal end of input and project the ledger into a result.

        Returns:
            ParseResult with header fields and account balances

        Raises:
            FormatError: If input ended before the header was complete
        """
        self._ensure_open()
        self._finished = True
        ctx = self.context

        if ctx.header is None:
            self._failed = True
            raise FormatError(
                "Input ended before the batch header was complete",
                expected=EXPECTED_LINES[ctx.state],
                line_number=ctx.line_number
            )

        if ctx.state in PARTIAL_TRANSACTION_STATES:
            logger.warning(
                f"Input ended inside a transaction group (expected {EXPECTED_LINES[ctx.state]!r}); "
                f"the partial transaction was not applied"
            )

        result = ParseResult(
            batch=ctx.header.batch_id,
            description=ctx.header.description,
            accounts=ctx.ledger.summaries(),
        )

        logger.info(
            f"Parsed batch {result.batch}: {ctx.line_number} lines, "
            f"{ctx.transaction_count} transactions, {len(result.accounts)} accounts"
        )
        return result


def parse_lines(lines: Iterable[str], strict_types: bool = False) -> ParseResult:
    """
    Parse a complete batch from an ordered sequence of lines.

    Args:
        lines: Lines without line terminators
        strict_types: Reject Type values other than Credit/Debit

    Returns:
        ParseResult

    Raises:
        FormatError: On a structural error
        ValidationError: On an invalid field value
    """
    parser = BatchParser(strict_types=strict_types)
    parser.feed_all(lines)
    return parser.finish()
