"""
Report endpoints - API routes for citizen report submission and retrieval.

Errors raised by the service (ValidationError, PersistenceError,
ConflictError) are turned into responses by the handlers in app.main.
"""

import json
from typing import List
from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.core.exceptions import ValidationError
from app.models.base import ErrorResponse, MessageResponse
from app.models.report import Report, ReportSubmitResponse
from app.services.report_service import ReportService
from app.services.validation import REQUIRED_FIELDS

router = APIRouter(tags=["Reports"])


def get_report_service(request: Request) -> ReportService:
    """The ReportService built at startup (see app.main)."""
    return request.app.state.report_service


def _pick_fields(source) -> dict:
    return {name: source.get(name) for name in REQUIRED_FIELDS}


async def _read_json_fields(request: Request) -> dict:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError()
    if not isinstance(body, dict):
        raise ValidationError()
    return _pick_fields(body)


@router.post(
    "/report",
    status_code=status.HTTP_201_CREATED,
    response_model=ReportSubmitResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": ErrorResponse}},
)
async def submit_report(request: Request, service: ReportService = Depends(get_report_service)):
    """
    Submit a new street-issue report.

    Accepts a multipart or url-encoded form (name, mobile, type, description,
    location, optional `image` file) or the same text fields as a JSON
    object. Required fields are checked by the service so a missing field
    yields 400 rather than FastAPI's 422.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        fields = await _read_json_fields(request)
        report = await run_in_threadpool(service.submit_report, fields)
    else:
        async with request.form() as form:
            fields = _pick_fields(form)
            image = form.get("image")
            if isinstance(image, UploadFile) and image.filename:
                report = await run_in_threadpool(service.submit_report, fields, image.filename, image.file)
            else:
                report = await run_in_threadpool(service.submit_report, fields)

    return ReportSubmitResponse(refid=report.refid, report=report)


@router.get(
    "/reports",
    response_model=List[Report],
    responses={500: {"model": ErrorResponse}},
)
def get_reports(service: ReportService = Depends(get_report_service)):
    """Every stored report; no filtering, ordering or pagination."""
    return service.list_reports()
