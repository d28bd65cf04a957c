import json
import logging
import re
from typing import Any, Optional

from fastapi import (
    APIRouter,
    Depends,
    Query,
    Request,
    status
)
from fastapi.responses import JSONResponse

from submissions_api.errors import InvalidRequestBodyError
from submissions_api.schemas import (
    DEFAULT_LIST_LIMIT,
    ErrorResponse,
    GetSubmissionsResponse,
    SubmissionForm,
    SubmitResponse,
)
from submissions_api.services import SubmissionService, get_submission_service

logger = logging.getLogger(__name__)

router = APIRouter()

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_SUBMISSION_FORM_SCHEMA = SubmissionForm.model_json_schema()


def parse_limit(raw: Optional[str]) -> int:
    """
    Leniently parse the `limit` query parameter.

    Only the leading integer counts ("3.7" is 3, "5abc" is 5). Missing, unparseable
    or zero values fall back to the default.
    """
    if raw is None:
        return DEFAULT_LIST_LIMIT
    match = _LEADING_INT.match(raw)
    if not match:
        return DEFAULT_LIST_LIMIT
    return int(match.group(1)) or DEFAULT_LIST_LIMIT


async def read_submission_form(request: Request) -> SubmissionForm:
    """Read the submit body as JSON or as urlencoded/multipart form data."""
    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        body = await request.body()
        if not body.strip():
            payload: Any = {}
        else:
            try:
                payload = json.loads(body)
            except ValueError:
                raise InvalidRequestBodyError("Request body is not valid JSON")
        if not isinstance(payload, dict):
            raise InvalidRequestBodyError("Request body must be a JSON object")
    else:
        form = await request.form()
        payload = {key: value for key, value in form.items() if isinstance(value, str)}
    return SubmissionForm.model_validate(payload)


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    # The body is read by hand to accept both JSON and form data
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": _SUBMISSION_FORM_SCHEMA},
                "application/x-www-form-urlencoded": {"schema": _SUBMISSION_FORM_SCHEMA},
                "multipart/form-data": {"schema": _SUBMISSION_FORM_SCHEMA},
            },
        }
    },
)
async def submit(
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmitResponse:
    """
    Accept one feedback submission.

    Storage failures are reported in the body (`success: false`) with a 200 status;
    only missing fields (400) and unexpected errors (500) change the status code.
    """
    form = await read_submission_form(request)
    return await service.submit(
        form,
        user_agent=request.headers.get("user-agent"),
        ip=client_ip(request),
    )


@router.get(
    "/submissions",
    response_model=GetSubmissionsResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def get_submissions(
    limit: Optional[str] = Query(None, description="Maximum number of submissions to return (default 10)"),
    service: SubmissionService = Depends(get_submission_service),
):
    """
    List recent submissions, newest first.

    Args:
        limit: Maximum number of submissions to return

    Returns:
        GetSubmissionsResponse: the submissions plus `blobName`/`lastModified`
    """
    try:
        return await service.list_recent(parse_limit(limit))
    except Exception as e:
        logger.error(f"Error fetching submissions: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(message="Error fetching submissions").model_dump(),
        )
