"""
Street Issue Reporter - FastAPI Application Entry Point

Citizens submit street-issue reports (with an optional photo) and anyone can
list them. Reports live in Firestore; photos are stored on local disk and
served under /uploads.

DESIGN PRINCIPLES:
- One ReportService per app, built here and shared through app.state
- Firestore is connected at startup and released at shutdown
- A database outage at startup is logged, not fatal
- Every request-level failure ends as a JSON error response
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.config.firebase import close_firestore, get_db, initialize_firestore
from app.core.exceptions import ReportServiceError, ValidationError
from app.core.settings import Settings, settings
from app.routes import health, reports
from app.services.report_service import ReportService
from app.services.report_store import FirestoreReportStore
from app.services.upload_storage import UploadStorage

logger = logging.getLogger(__name__)


def configure_logging(app_settings: Settings) -> None:
    logging.basicConfig(
        level=app_settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    app_settings = app_settings or settings
    configure_logging(app_settings)

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="Submit and list citizen street-issue reports",
        debug=app_settings.DEBUG,
    )

    uploads = UploadStorage(app_settings.UPLOAD_DIR)

    app.state.settings = app_settings
    app.state.report_service = ReportService(
        store=FirestoreReportStore(get_db, app_settings.REPORTS_COLLECTION),
        uploads=uploads,
    )

    @app.exception_handler(ReportServiceError)
    async def report_error_handler(request: Request, exc: ReportServiceError):
        if isinstance(exc, ValidationError):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"msg": ValidationError.public_message},
            )
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc)},
        )

    # Malformed form bodies are a client problem, answered like missing fields
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"msg": ValidationError.public_message},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """Create the upload directory and connect to Firestore; a database failure does not stop startup."""
        logger.info(f"Starting {app_settings.APP_NAME} v{app_settings.APP_VERSION}")
        uploads.ensure_directory()
        try:
            initialize_firestore(app_settings)
        except Exception as e:
            logger.warning(f"Firestore initialization failed: {e}")
            logger.warning("The app will start but database operations may fail.")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {app_settings.APP_NAME}")
        close_firestore()

    @app.get("/", response_class=PlainTextResponse)
    def root():
        """Liveness string."""
        return "Server Running"

    app.include_router(health.router)
    app.include_router(reports.router)
    app.mount("/uploads", StaticFiles(directory=uploads.directory, check_dir=False), name="uploads")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
