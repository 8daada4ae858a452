"""
Error taxonomy for report handling.

Every error is converted to an HTTP response by the handlers registered in
app.main; none of them stop the process.
"""

from typing import List, Optional


class ReportServiceError(Exception):
    """Base class for errors raised by the report service."""

    status_code: int = 500


class ValidationError(ReportServiceError):
    """A required report field is missing or empty."""

    status_code = 400
    public_message = "Please fill all fields"

    def __init__(self, errors: Optional[List] = None):
        self.errors = list(errors or [])
        fields = ", ".join(error.field for error in self.errors)
        super().__init__(f"Missing required fields: {fields}" if fields else self.public_message)


class PersistenceError(ReportServiceError):
    """The document store could not be reached, read or written."""


class ConflictError(PersistenceError):
    """A report with the same refid already exists."""

    def __init__(self, refid: str):
        self.refid = refid
        super().__init__(f"Report with refid {refid} already exists")
