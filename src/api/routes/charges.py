"""Charge calculation endpoint."""

import time

from fastapi import APIRouter, Depends, HTTPException, Request

from api.dependencies import verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import ChargesRequest
from api.routes.reports import get_client_ip, map_service_error, record_http_error
from core.validation import validate_entries
from services.calculator import calculate_charges

router = APIRouter(prefix="/v1")


@router.post("/charges/calculate")
async def calculate_charges_endpoint(
    request: Request,
    body: ChargesRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Calculate labor and travel charges for time entries.

    Entries that break the time-sheet invariants are still calculated; the
    problems are returned in `warnings`.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/charges/calculate",
        method="POST",
        client_ip=get_client_ip(request),
        entries_extracted=len(body.entries),
    )

    try:
        problems = validate_entries(body.entries)
        summary = calculate_charges(body.entries, travel_data=body.travel_data)

        request_log.status_code = 200
        request_log.total_hours = sum(h.total for h in summary.processed_entries)
        for problem in problems:
            request_log.details.append(("warning", problem))
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        return {**summary.to_json_dict(), "warnings": problems}

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
