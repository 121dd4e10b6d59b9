"""
Result Models

Every service operation answers with a result instead of raising,
so the UI only has to render a notice.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NoticeLevel(str, Enum):
    """How a notice should be presented."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """A user-facing message produced by a service."""

    level: NoticeLevel
    title: str
    message: str


class ValidationIssue(BaseModel):
    """A single validation issue found in a draft."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of validating a person or expense draft."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[ValidationIssue]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue
        return None


class OperationResult(BaseModel):
    """
    Result of a list operation.

    `ok` is False when nothing was persisted. `requires_confirmation`
    means the operation stopped to ask the user and can be retried
    with a confirmation callback.
    """

    ok: bool
    notice: Optional[Notice] = None
    affected_ids: list[str] = Field(default_factory=list)
    requires_confirmation: bool = False
