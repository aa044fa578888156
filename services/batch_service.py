"""
Batch processing service.
Reads batch files line by line, parses them and exports the balances.
"""
import io
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, TextIO

from core.config import get_settings
from core.exceptions import DataNotFoundError, FileProcessingError
from core.exporters import create_output_filename, export_to_json
from core.logger import setup_logger
from core.parsing import BatchParser
from core.schema import ParseResult

logger = setup_logger(__name__)


def iter_lines(stream: TextIO) -> Iterator[str]:
    """
    Yield lines from a text stream without their line terminators.

    Args:
        stream: Readable text stream

    Yields:
        Lines in file order
    """
    for raw_line in stream:
        yield raw_line.rstrip("\r\n")


class BatchService:
    """Service for turning batch files into consolidated account balances."""

    def __init__(self, strict_types: Optional[bool] = None):
        """
        Initialize batch service.

        Args:
            strict_types: Override the STRICT_TRANSACTION_TYPE setting
        """
        self.settings = get_settings()
        if strict_types is None:
            strict_types = self.settings.strict_transaction_type
        self.strict_types = strict_types

    def _new_parser(self) -> BatchParser:
        return BatchParser(strict_types=self.strict_types)

    def process_stream(self, stream: TextIO) -> ParseResult:
        """
        Parse a batch from an open text stream.

        Args:
            stream: Readable text stream, e.g. sys.stdin

        Returns:
            ParseResult

        Raises:
            FormatError: On a structural error
            ValidationError: On an invalid field value
        """
        parser = self._new_parser()
        parser.feed_all(iter_lines(stream))
        return parser.finish()

    def parse_text(self, text: str) -> ParseResult:
        """
        Parse a batch held in memory.

        Args:
            text: Full file content

        Returns:
            ParseResult
        """
        parser = self._new_parser()
        parser.feed_all(iter_lines(io.StringIO(text, newline="")))
        return parser.finish()

    def process_file(self, file_path: str) -> ParseResult:
        """
        Parse a batch file from disk.

        Args:
            file_path: Path to batch file

        Returns:
            ParseResult

        Raises:
            DataNotFoundError: If the file doesn't exist
            FileProcessingError: If the file cannot be read or decoded
            FormatError: On a structural error
            ValidationError: On an invalid field value
        """
        path = Path(file_path)
        if not path.is_file():
            raise DataNotFoundError(
                f"File not found: {file_path}",
                details={"file_path": file_path}
            )

        logger.info(f"Processing batch file: {path.name}")

        try:
            with open(path, "r", encoding=self.settings.input_encoding, newline="") as f:
                result = self.process_stream(f)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {file_path}: {e}")
            raise FileProcessingError(
                "Failed to read batch file",
                details={
                    "file_path": file_path,
                    "encoding": self.settings.input_encoding,
                    "error": str(e),
                }
            )

        logger.info(f"Parsed batch {result.batch} from {path.name}: {len(result.accounts)} accounts")
        return result

    def build_statistics(self, result: ParseResult) -> Dict[str, int]:
        """
        Build summary statistics for a parse result.

        Args:
            result: Parse result

        Returns:
            Dictionary with account count, credit/debit totals and net total
        """
        nets = [account.net_transactions for account in result.accounts]
        return {
            "account_count": len(nets),
            "total_credits": sum(n for n in nets if n > 0),
            "total_debits": -sum(n for n in nets if n < 0),
            "net_total": sum(nets),
        }

    def process_and_export(
        self,
        file_path: str,
        output_path: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Parse a batch file and write its balances as JSON.

        Args:
            file_path: Path to batch file
            output_path: Output path (defaults to a timestamped file in OUTPUT_PATH)

        Returns:
            Dictionary with output_path and stats
        """
        result = self.process_file(file_path)
        stats = self.build_statistics(result)

        if stats["net_total"] != 0:
            logger.warning(f"Batch {result.batch} does not balance: net total {stats['net_total']}")

        if output_path is None:
            output_path = create_output_filename(result.batch, self.settings.output_path)

        export_to_json(result, output_path, self.settings.output_indent)

        return {
            "output_path": output_path,
            "stats": stats,
        }
