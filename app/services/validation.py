"""
Input validation for report submissions.

Runs before anything is written: a submission either passes as a whole or
nothing (upload, record) is stored.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

REQUIRED_FIELDS = ("name", "mobile", "type", "description", "location")


@dataclass
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def missing_fields(self) -> List[str]:
        return [error.field for error in self.errors]


def validate_report_fields(fields: Mapping[str, Optional[str]]) -> ValidationResult:
    """
    Check that every required text field is present and non-blank.

    Args:
        fields: Raw form values keyed by field name (missing keys allowed)

    Returns:
        ValidationResult listing one FieldError per missing/blank field,
        in REQUIRED_FIELDS order
    """
    result = ValidationResult()
    for name in REQUIRED_FIELDS:
        value = fields.get(name)
        if value is None:
            result.errors.append(FieldError(name, "field is required"))
        elif not str(value).strip():
            result.errors.append(FieldError(name, "field must not be empty"))
    return result
