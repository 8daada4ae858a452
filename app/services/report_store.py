"""
Firestore persistence for reports.

Each report is one document in the reports collection, keyed by its refid.
Documents are written with create(), so the store itself rejects a second
report with the same refid.
"""

import logging
from typing import Callable, List

from google.api_core.exceptions import AlreadyExists
from pydantic import ValidationError as ModelValidationError

from app.core.exceptions import ConflictError, PersistenceError
from app.models.report import Report

logger = logging.getLogger(__name__)


class FirestoreReportStore:
    """
    Create/list operations on the reports collection.

    client_factory is called for every operation so a database that was
    unreachable at startup is picked up once it becomes available.
    """

    def __init__(self, client_factory: Callable, collection: str = "reports"):
        self._client_factory = client_factory
        self.collection = collection

    def _collection_ref(self):
        try:
            db = self._client_factory()
        except Exception as e:
            raise PersistenceError(str(e)) from e
        if db is None:
            raise PersistenceError("Database not initialized. Please check Firebase configuration.")
        return db.collection(self.collection)

    def create(self, report: Report) -> Report:
        """
        Store a new report.

        Raises:
            ConflictError: a document with this refid already exists
            PersistenceError: any other database failure
        """
        doc_ref = self._collection_ref().document(report.refid)
        try:
            doc_ref.create(report.to_document())
        except AlreadyExists as e:
            logger.error(f"refid collision on {report.refid}")
            raise ConflictError(report.refid) from e
        except Exception as e:
            logger.error(f"Failed to save report {report.refid} to Firestore: {e}", exc_info=True)
            raise PersistenceError(str(e)) from e

        logger.info(f"Report saved to Firestore: {report.refid}")
        return report

    def list_all(self) -> List[Report]:
        """Every stored report, in whatever order the database returns them."""
        collection_ref = self._collection_ref()
        try:
            reports = []
            for doc in collection_ref.stream():
                data = doc.to_dict() or {}
                data.setdefault("refid", doc.id)
                reports.append(Report.model_validate(data))
            return reports
        except ModelValidationError as e:
            logger.error(f"Stored report failed to parse: {e}")
            raise PersistenceError(f"Stored report is malformed: {e}") from e
        except Exception as e:
            logger.error(f"Failed to retrieve reports: {e}", exc_info=True)
            raise PersistenceError(str(e)) from e
