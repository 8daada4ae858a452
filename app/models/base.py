"""
Shared response bodies.

The report API answers failures with a bare JSON object rather than
FastAPI's default {"detail": ...} envelope, so clients can read either
`msg` (bad input) or `error` (server side failure).
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Client error body, e.g. {"msg": "Please fill all fields"}."""
    msg: str


class ErrorResponse(BaseModel):
    """Server error body carrying the underlying error message."""
    error: str
