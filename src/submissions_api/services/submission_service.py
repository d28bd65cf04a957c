"""
Submission service for the Submissions API.
Validates incoming form fields, builds submission records and hands them to the store.
"""

import logging
from typing import Optional

from fastapi import Request

from submissions_api.adapters.storage import BaseSubmissionStore
from submissions_api.schemas import (
    DEFAULT_CATEGORY,
    GetSubmissionsResponse,
    Submission,
    SubmissionForm,
    SubmitResponse,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name, email, and message are required fields"


class SubmissionValidationError(ValueError):
    """A required form field is missing or blank."""


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class SubmissionService:
    """Service for accepting and listing feedback submissions"""

    def __init__(self, store: BaseSubmissionStore):
        self.store = store

    @property
    def storage_status(self) -> str:
        return "connected" if self.store.is_configured else "not configured"

    def build_submission(
        self,
        form: SubmissionForm,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> Submission:
        """Validate ``form`` and turn it into a normalized ``Submission``."""
        name = _clean(form.name)
        email = _clean(form.email).lower()
        message = _clean(form.message)
        if not (name and email and message):
            raise SubmissionValidationError(REQUIRED_FIELDS_MESSAGE)

        return Submission(
            name=name,
            email=email,
            category=form.category or DEFAULT_CATEGORY,
            message=message,
            user_agent=user_agent,
            ip=ip,
        )

    async def submit(
        self,
        form: SubmissionForm,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> SubmitResponse:
        """
        Validate and store one submission.

        The envelope always carries ``submissionId``, even when the store reports a
        failure: the id is generated before the write, so callers should read it as
        "accepted for processing" and check ``success`` for durability.
        """
        submission = self.build_submission(form, user_agent=user_agent, ip=ip)
        result = await self.store.put(submission.to_document())
        if not result.success:
            logger.warning(f"Submission {submission.id} was not stored: {result.message}")

        return SubmitResponse(
            success=result.success,
            message=result.message,
            submission_id=submission.id,
        )

    async def list_recent(self, limit: int) -> GetSubmissionsResponse:
        submissions = await self.store.list(limit)
        return GetSubmissionsResponse(success=True, data=submissions, count=len(submissions))


def get_submission_service(request: Request) -> SubmissionService:
    """FastAPI dependency wiring the process-wide store into a service."""
    return SubmissionService(request.app.state.store)
