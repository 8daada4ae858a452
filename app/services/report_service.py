"""
Report service - Business logic for citizen street-issue reports.

DESIGN NOTE:
- Validation happens before any write; a rejected submission stores nothing
- The refid is always generated here, never taken from the client
- A refid collision is reported as ConflictError, not retried
- Reports are create-only: no update or delete paths exist
"""

import logging
from datetime import datetime, timezone
from typing import BinaryIO, Callable, List, Mapping, Optional

from app.core.exceptions import PersistenceError, ValidationError
from app.models.report import Report
from app.services.report_store import FirestoreReportStore
from app.services.upload_storage import UploadStorage
from app.services.validation import REQUIRED_FIELDS, validate_report_fields
from app.utils.refid import generate_refid

logger = logging.getLogger(__name__)


class ReportService:
    """
    Submit and list reports.

    One instance is built at application startup and shared by all requests;
    it holds no per-request state.
    """

    def __init__(
        self,
        store: FirestoreReportStore,
        uploads: UploadStorage,
        refid_factory: Callable[[], str] = generate_refid,
    ):
        self.store = store
        self.uploads = uploads
        self._refid_factory = refid_factory

    def submit_report(
        self,
        fields: Mapping[str, Optional[str]],
        image_filename: Optional[str] = None,
        image_stream: Optional[BinaryIO] = None,
    ) -> Report:
        """
        Validate, store the optional photo and persist a new report.

        Args:
            fields: Form values for name, mobile, type, description, location
            image_filename: Client filename of the attached photo, if any
            image_stream: Readable binary stream with the photo bytes

        Returns:
            Report: The persisted record including refid, time and image path

        Raises:
            ValidationError: a required field is missing or blank
            ConflictError: the generated refid already exists
            PersistenceError: the database could not be written
        """
        validation = validate_report_fields(fields)
        if not validation.ok:
            logger.warning(f"Report rejected, missing fields: {validation.missing_fields}")
            raise ValidationError(validation.errors)

        image_path = None
        if image_stream is not None and image_filename:
            image_path = self.uploads.save(image_filename, image_stream)

        report = Report(
            refid=self._refid_factory(),
            image=image_path,
            time=datetime.now(timezone.utc),
            **{name: str(fields[name]).strip() for name in REQUIRED_FIELDS},
        )

        try:
            self.store.create(report)
        except PersistenceError:
            if image_path:
                self.uploads.delete(image_path)
            raise

        logger.info(f"Report {report.refid} submitted (type={report.type}, image={'yes' if image_path else 'no'})")
        return report

    def list_reports(self) -> List[Report]:
        reports = self.store.list_all()
        logger.info(f"Listing {len(reports)} reports")
        return reports
