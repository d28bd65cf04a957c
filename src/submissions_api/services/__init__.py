"""
Service layer for the Submissions API.

Holds business rules between the HTTP routers and the storage adapters.
"""

from .submission_service import (
    SubmissionService,
    SubmissionValidationError,
    get_submission_service,
)

__all__ = [
    'SubmissionService', 'SubmissionValidationError', 'get_submission_service'
]
