"""
JSON export of consolidated batch balances.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from core.config import get_settings
from core.exceptions import ExportError
from core.logger import setup_logger
from core.schema import ParseResult

logger = setup_logger(__name__)


def result_to_dict(result: ParseResult) -> Dict[str, Any]:
    """
    Convert a parse result to plain JSON-compatible data.

    Args:
        result: Parse result

    Returns:
        Dictionary with batch, description and accounts keys
    """
    return result.model_dump(mode="json")


def result_to_json(result: ParseResult, indent: Optional[int] = None) -> str:
    """
    Serialize a parse result to a JSON document.

    Args:
        result: Parse result
        indent: Indentation width (defaults to configured value, 0 for compact)

    Returns:
        JSON string
    """
    if indent is None:
        indent = get_settings().output_indent
    return json.dumps(result_to_dict(result), indent=indent or None, ensure_ascii=False)


def export_to_json(
    result: ParseResult,
    output_path: str,
    indent: Optional[int] = None
) -> str:
    """
    Write a parse result to a JSON file.

    Args:
        result: Parse result
        output_path: Output file path
        indent: Indentation width (defaults to configured value)

    Returns:
        Path to created file

    Raises:
        ExportError: If the file cannot be written
    """
    logger.info(f"Exporting {len(result.accounts)} account balances to {output_path}")

    try:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(result_to_json(result, indent) + "\n", encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to export JSON: {e}")
        raise ExportError(
            "Failed to export to JSON",
            details={"output_path": output_path, "error": str(e)}
        )

    logger.info(f"Successfully exported to {output_path}")
    return output_path


def create_output_filename(batch: int, base_path: Optional[str] = None) -> str:
    """
    Create timestamped output filename.

    Args:
        batch: Batch id from the file header
        base_path: Base directory path (defaults to configured output path)

    Returns:
        Full output file path
    """
    if base_path is None:
        base_path = get_settings().output_path

    Path(base_path).mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    filename = f"batch_{batch}_balances_{timestamp}.json"

    return str(Path(base_path) / filename)
