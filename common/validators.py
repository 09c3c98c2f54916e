import re
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

REQUIRED_FIELDS = ("first_name", "last_name", "company", "email")

_datetime_adapter = TypeAdapter(datetime)

# Bare numbers would otherwise be read as Unix epochs
_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class VisitorSubmission(BaseModel):
    """Raw sign-in form payload. Presence of the contact fields is checked separately."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: Optional[str] = Field(default=None, alias="firstname")
    last_name: Optional[str] = Field(default=None, alias="surname")
    company: Optional[str] = None
    email: Optional[str] = None
    timestamp: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Return the JSON keys of required fields that are absent or blank."""
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not value.strip():
                missing.append(type(self).model_fields[name].alias or name)
        return missing


class VisitorRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    company: str
    email: str
    timestamp: datetime

    @field_validator("first_name", "last_name", "company", "email")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()

    @classmethod
    def from_submission(cls, submission: VisitorSubmission, timestamp: datetime) -> "VisitorRecord":
        return cls(
            first_name=submission.first_name,
            last_name=submission.last_name,
            company=submission.company,
            email=submission.email,
            timestamp=timestamp,
        )


def resolve_timestamp(value: Optional[str], now: Callable[[], datetime]) -> datetime:
    """Parse a caller-supplied ISO-8601 timestamp, or fall back to `now()` when blank.

    Naive values are taken as UTC. Raises ValueError when the string does not
    parse as a date and time, including bare numbers.
    """
    if value is None or not value.strip():
        return now()
    value = value.strip()
    if _NUMERIC_RE.match(value):
        raise ValueError(f"Timestamp must be an ISO-8601 date and time, got {value!r}")
    parsed = _datetime_adapter.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
