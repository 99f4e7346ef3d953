"""Service report extraction and workbook endpoints."""

import asyncio
import time
import warnings
from pathlib import Path
from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import Response

from api.dependencies import verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, TextExtractRequest
from core.config import (
    MAX_UPLOAD_SIZE_BYTES,
    PDF_EXTENSIONS,
    SPREADSHEET_EXTENSIONS,
    STRICT_PARSING,
    VARIANT_SPREADSHEET,
    VARIANTS,
)
from core.database import get_connection, save_extraction
from core.errors import FormatError, MalformedDate, MalformedTime
from models.entries import ExtractedReport
from services.calculator import calculate_charges
from services.extractor import extract_report, read_source
from services.text_report import TextSource
from services.timesheet import to_timesheet_document
from services.workbook import report_workbook_to_bytes

router = APIRouter(prefix="/v1")

OUTPUT_FORMATS = ("report", "timesheet")
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def api_error(status_code: int, error: str, code: str, details: list[str] | None = None):
    """HTTPException carrying the standard error body."""
    return HTTPException(
        status_code=status_code,
        detail={"error": error, "code": code, "details": details or []},
    )


def record_http_error(request_log: RequestLog, exc: HTTPException, start_time: float) -> None:
    request_log.status_code = exc.status_code
    if isinstance(exc.detail, dict):
        request_log.error_code = exc.detail.get("code")
        request_log.error_message = exc.detail.get("error")
        for detail in exc.detail.get("details", []):
            request_log.details.append(("validation_error", detail))
    else:
        request_log.error_message = str(exc.detail)
    request_log.processing_time_ms = int((time.time() - start_time) * 1000)


def map_service_error(exc: Exception) -> HTTPException:
    """Translate extraction errors to API errors."""
    if isinstance(exc, FormatError):
        return api_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Service report format not recognized",
            ErrorCodes.FORMAT_ERROR,
            [str(exc)],
        )
    if isinstance(exc, (MalformedTime, MalformedDate)):
        return api_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Malformed value in service report",
            ErrorCodes.VALIDATION_ERROR,
            [str(exc)],
        )
    if isinstance(exc, ValueError):
        return api_error(
            status.HTTP_400_BAD_REQUEST, str(exc), ErrorCodes.INVALID_REQUEST
        )
    return api_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", ErrorCodes.INTERNAL_ERROR
    )


def validate_variant(variant: str) -> None:
    if variant not in VARIANTS:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            f"Unknown format variant '{variant}'",
            ErrorCodes.INVALID_REQUEST,
            [f"Valid variants: {', '.join(VARIANTS)}"],
        )


def validate_output_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            f"Unknown output format '{output_format}'",
            ErrorCodes.INVALID_REQUEST,
            [f"Valid formats: {', '.join(OUTPUT_FORMATS)}"],
        )


def archive_report(report: ExtractedReport, source_name: str | None) -> None:
    """Store the extraction; archive failures never fail the request."""
    try:
        conn = get_connection()
        try:
            save_extraction(conn, report, source_name)
        finally:
            conn.close()
    except Exception as e:
        warnings.warn(f"Could not archive extraction: {e}")


def render_report(report: ExtractedReport, output_format: str) -> dict:
    if output_format == "timesheet":
        return to_timesheet_document(report)
    return report.to_json_dict()


def finish_log(request_log: RequestLog, report: ExtractedReport, start_time: float) -> None:
    request_log.status_code = 200
    request_log.entries_extracted = len(report.time_entries)
    request_log.total_hours = sum(
        hours.total for hours in calculate_charges(report.time_entries).processed_entries
    )
    for warning in report.warnings:
        request_log.details.append(("parse_warning", warning))
    request_log.processing_time_ms = int((time.time() - start_time) * 1000)


def _extract_in_thread(
    file_content: bytes, filename: str, variant: str
) -> ExtractedReport:
    """Read the upload and extract it (blocking; runs in thread pool)."""
    source = read_source(file_content, filename, variant)
    report = extract_report(source, variant, strict=STRICT_PARSING, silent=True)
    archive_report(report, filename)
    return report


def _extract_text_in_thread(source: TextSource, variant: str) -> ExtractedReport:
    report = extract_report(source, variant, strict=STRICT_PARSING, silent=True)
    archive_report(report, None)
    return report


@router.post("/reports/extract")
async def extract_report_endpoint(
    request: Request,
    file: Annotated[UploadFile, File(description="EFSR workbook or PDF service report")],
    variant: Annotated[str, Form(description="Format variant of the report")],
    format: Annotated[
        str, Form(description="'report' (default) or 'timesheet'")
    ] = "report",
    _api_key: str = Depends(verify_api_key),
):
    """
    Extract a service report upload.

    Returns the ExtractedReport JSON, or the time-sheet import document when
    format=timesheet.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/reports/extract",
        method="POST",
        client_ip=get_client_ip(request),
        file_name=file.filename,
        variant=variant,
    )

    try:
        if not file or not file.filename:
            raise api_error(
                status.HTTP_400_BAD_REQUEST, "No file provided", ErrorCodes.INVALID_REQUEST
            )

        validate_variant(variant)
        validate_output_format(format)

        # File type must fit the variant
        expected = SPREADSHEET_EXTENSIONS if variant == VARIANT_SPREADSHEET else PDF_EXTENSIONS
        if Path(file.filename).suffix.lower() not in expected:
            raise api_error(
                status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                f"File type does not match variant '{variant}'",
                ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                [f"Received: {file.filename}", f"Expected: {', '.join(expected)}"],
            )

        file_content = await file.read()
        request_log.file_size_bytes = len(file_content)

        if len(file_content) > MAX_UPLOAD_SIZE_BYTES:
            max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
            raise api_error(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File exceeds maximum size of {max_mb} MB",
                ErrorCodes.FILE_TOO_LARGE,
                [f"File size: {len(file_content) / (1024*1024):.1f} MB"],
            )

        report = await asyncio.to_thread(
            _extract_in_thread, file_content, file.filename, variant
        )

        finish_log(request_log, report, start_time)
        return render_report(report, format)

    except HTTPException as e:
        record_http_error(request_log, e, start_time)
        raise

    except Exception as e:
        http_error = map_service_error(e)
        record_http_error(request_log, http_error, start_time)
        request_log.error_message = str(e)
        raise http_error

    finally:
        # Always log the request
        try:
            log_request(request_log)
        except Exception:
            # Don't fail the request if logging fails
            pass


@router.post("/reports/extract-text")
async def extract_text_endpoint(
    request: Request,
    body: TextExtractRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Extract a text-variant report from page text supplied as JSON."""
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/reports/extract-text",
        method="POST",
        client_ip=get_client_ip(request),
        variant=body.variant,
    )

    try:
        validate_variant(body.variant)
        validate_output_format(body.format)
        if body.variant == VARIANT_SPREADSHEET:
            raise api_error(
                status.HTTP_400_BAD_REQUEST,
                "The spreadsheet variant needs a file upload",
                ErrorCodes.INVALID_REQUEST,
                ["Use /v1/reports/extract"],
            )

        source = TextSource(text=body.text, fragments=body.fragments)
        report = await asyncio.to_thread(_extract_text_in_thread, source, body.variant)

        finish_log(request_log, report, start_time)
        return render_report(report, body.format)

    except HTTPException as e:
        record_http_error(request_log, e, start_time)
        raise

    except Exception as e:
        http_error = map_service_error(e)
        record_http_error(request_log, http_error, start_time)
        request_log.error_message = str(e)
        raise http_error

    finally:
        try:
            log_request(request_log)
        except Exception:
            pass


@router.post("/reports/workbook")
async def report_workbook_endpoint(
    request: Request,
    report: ExtractedReport,
    _api_key: str = Depends(verify_api_key),
):
    """Render an extracted report and its calculated charges as an Excel workbook."""
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/reports/workbook",
        method="POST",
        client_ip=get_client_ip(request),
        variant=report.variant or None,
        entries_extracted=len(report.time_entries),
    )

    try:
        excel_bytes, output_filename = await asyncio.to_thread(report_workbook_to_bytes, report)

        request_log.status_code = 200
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        return Response(
            content=excel_bytes,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{output_filename}"'},
        )

    except Exception as e:
        http_error = map_service_error(e)
        record_http_error(request_log, http_error, start_time)
        request_log.error_message = str(e)
        raise http_error

    finally:
        try:
            log_request(request_log)
        except Exception:
            pass
