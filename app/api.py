"""
FastAPI routes for batch file upload and parsing.
"""
from typing import Any, Dict

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import Response

from core.config import get_settings
from core.exceptions import BatchLedgerException, ParsingError
from core.logger import setup_logger
from core.schema import ParseResult
from services.batch_service import BatchService

logger = setup_logger(__name__)
settings = get_settings()

APP_VERSION = "1.0.0"

app = FastAPI(
    title="Batch Ledger",
    description="Parse batch transaction files into consolidated account balances",
    version=APP_VERSION
)

batch_service = BatchService()


def error_detail(error: BatchLedgerException) -> Dict[str, Any]:
    """
    Build the JSON detail body for a failed request.

    Args:
        error: Raised domain exception

    Returns:
        Dictionary with error message, type and details
    """
    return {
        "error": error.message,
        "error_type": type(error).__name__,
        "details": error.details,
    }


def decode_upload(content: bytes, filename: str) -> str:
    """
    Check size and decode uploaded bytes.

    Args:
        content: Raw upload
        filename: Name for error messages

    Returns:
        Decoded text

    Raises:
        HTTPException: If the upload is too large or cannot be decoded
    """
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {filename} ({len(content)} bytes, limit {settings.max_upload_bytes})"
        )
    try:
        return content.decode(settings.input_encoding)
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot decode {filename} as {settings.input_encoding}: {e}"
        )


def parse_or_raise(text: str, source: str) -> ParseResult:
    """
    Parse batch text, mapping domain errors to HTTP errors.

    Args:
        text: Batch file content
        source: Upload name, for logging

    Returns:
        ParseResult

    Raises:
        HTTPException: 422 on parse errors, 400 on other domain errors, 500 otherwise
    """
    try:
        result = batch_service.parse_text(text)
    except ParsingError as e:
        logger.warning(f"Rejected {source}: {e.message} ({e.details})")
        raise HTTPException(status_code=422, detail=error_detail(e))
    except BatchLedgerException as e:
        logger.error(f"Failed to process {source}: {e.message}")
        raise HTTPException(status_code=400, detail=error_detail(e))
    except Exception as e:
        logger.error(f"Unexpected error processing {source}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to process batch: {str(e)}")

    logger.info(f"Parsed {source}: batch {result.batch}, {len(result.accounts)} accounts")
    return result


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "batch_ledger",
        "version": APP_VERSION
    }


@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon to avoid 404 errors."""
    return Response(status_code=204)


@app.post("/parse", response_model=ParseResult)
async def parse_file(file: UploadFile = File(...)):
    """
    Parse an uploaded batch file.

    Args:
        file: Batch file (multipart upload)

    Returns:
        Consolidated balances for the batch
    """
    filename = file.filename or "upload"
    logger.info(f"Received file: {filename}")

    content = await file.read()
    text = decode_upload(content, filename)
    return parse_or_raise(text, filename)


@app.post("/parse/text", response_model=ParseResult)
async def parse_text(request: Request):
    """
    Parse a batch file sent as the raw request body.

    Returns:
        Consolidated balances for the batch
    """
    content = await request.body()
    text = decode_upload(content, "request body")
    return parse_or_raise(text, "request body")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
