from fastapi import APIRouter, Depends

from submissions_api.schemas import HealthResponse
from submissions_api.services import SubmissionService, get_submission_service

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(service: SubmissionService = Depends(get_submission_service)):
    """
    Health check endpoint for monitoring API status.

    Always answers 200; `storage` reports whether submissions are durably stored.
    """
    return HealthResponse(storage=service.storage_status)
