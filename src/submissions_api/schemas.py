####################################
# --- Request/response schemas --- #
####################################

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

DEFAULT_CATEGORY = "feedback"
DEFAULT_LIST_LIMIT = 10
TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 9


def random_token(length: int = TOKEN_LENGTH) -> str:
    """Short lowercase base-36 token."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. ``2024-01-01T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_submission_id() -> str:
    return f"{epoch_millis()}-{random_token()}"


class SubmissionForm(BaseModel):
    """Raw fields of `POST /api/submit`, accepted as JSON or form data."""
    name: Optional[str] = None
    email: Optional[str] = None
    category: Optional[str] = None
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class Submission(BaseModel):
    """One stored feedback record. Serialized with camelCase keys."""
    id: str = Field(
        default_factory=new_submission_id,
        description="Creation time in epoch millis plus a random token.",
        json_schema_extra={"example": "1704110400000-k3j9x0a2b"},
    )
    name: str
    email: str
    category: str = DEFAULT_CATEGORY
    message: str
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO-8601 creation time (UTC).")
    user_agent: Optional[str] = Field(None, alias="userAgent")
    ip: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "1704110400000-k3j9x0a2b",
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "category": "feedback",
                "message": "Great service!",
                "timestamp": "2024-01-01T12:00:00.000Z",
                "userAgent": "Mozilla/5.0",
                "ip": "203.0.113.7",
            }
        },
    )

    def to_document(self) -> Dict[str, Any]:
        """The JSON object persisted for this submission."""
        return self.model_dump(by_alias=True)


class SubmitResponse(BaseModel):
    """Response model for `POST /api/submit`."""
    success: bool
    message: str = Field(description="A message about the operation.")
    submission_id: str = Field(
        alias="submissionId",
        description="Generated before storage, so present even when storage failed.",
    )

    model_config = ConfigDict(populate_by_name=True)


class GetSubmissionsResponse(BaseModel):
    """Response model for `GET /api/submissions`."""
    success: bool = True
    data: List[Dict[str, Any]]
    count: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": [
                    {
                        "id": "1704110400000-k3j9x0a2b",
                        "name": "Ada Lovelace",
                        "email": "ada@example.com",
                        "category": "feedback",
                        "message": "Great service!",
                        "timestamp": "2024-01-01T12:00:00.000Z",
                        "userAgent": "Mozilla/5.0",
                        "ip": "203.0.113.7",
                        "blobName": "submission-1704110400000-q8w7e6r5t.json",
                        "lastModified": "2024-01-01T12:00:00+00:00",
                    }
                ],
                "count": 1,
            }
        }
    )


class HealthResponse(BaseModel):
    """Response model for `GET /api/health`."""
    status: str = "healthy"
    timestamp: str = Field(default_factory=utc_timestamp)
    storage: Literal["connected", "not configured"]


class ErrorResponse(BaseModel):
    """Envelope returned with 4xx/5xx responses."""
    success: bool = False
    message: str
