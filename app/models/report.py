"""
Pydantic models for citizen street-issue reports.
These models describe the stored record and the API responses built from it.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class Report(BaseModel):
    """
    A persisted street-issue report.

    The refid doubles as the document id in the reports collection.
    Reports are never updated once created.
    """
    refid: str = Field(..., description="Human-shareable reference code, e.g. RPT-4F8K2QZT")
    name: str = Field(..., min_length=1, description="Reporter name")
    mobile: str = Field(..., min_length=1, description="Reporter contact number")
    type: str = Field(..., min_length=1, description="Issue category (free-form)")
    description: str = Field(..., min_length=1, description="What the citizen observed")
    location: str = Field(..., min_length=1, description="Where the issue is")
    image: Optional[str] = Field(None, description="Public path of the uploaded photo, e.g. /uploads/1718000000000.jpg")
    time: datetime = Field(..., description="Submission time (UTC)")

    class Config:
        json_schema_extra = {
            "example": {
                "refid": "RPT-4F8K2QZT",
                "name": "Asha",
                "mobile": "9999999999",
                "type": "Pothole",
                "description": "Large pothole on Main St",
                "location": "Main St & 3rd",
                "image": "/uploads/1718000000000.jpg",
                "time": "2024-06-10T06:13:20Z",
            }
        }
        extra = "ignore"

    def to_document(self) -> dict:
        """Firestore document body (the refid is also the document id)."""
        return self.model_dump()


class ReportSubmitResponse(BaseModel):
    """Body returned by POST /report on success."""
    msg: str = "Report submitted successfully"
    refid: str
    report: Report
