"""
Health check endpoints.
Liveness of the service and reachability of the reports collection.
"""

from fastapi import APIRouter, HTTPException, Request
from app.core.exceptions import PersistenceError
from datetime import datetime, timezone


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check(request: Request):
    """Returns 200 while the process is serving requests."""
    app_settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": app_settings.APP_NAME,
        "version": app_settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
def database_health(request: Request):
    """
    Report store check.

    Reads the configured reports collection through the report service, so a
    200 here means GET /reports would work too. 503 otherwise.
    """
    service = request.app.state.report_service
    try:
        report_count = len(service.list_reports())
    except PersistenceError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Report store unavailable: {e}"
        )

    return {
        "status": "healthy",
        "database": "mock" if request.app.state.settings.USE_MOCK_DB else "firestore",
        "reports_collection": service.store.collection,
        "reports_count": report_count,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
