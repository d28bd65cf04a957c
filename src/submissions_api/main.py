from textwrap import dedent
import logging
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from submissions_api.adapters.storage import BaseSubmissionStore, StorageFactory
from submissions_api.errors import (
    InvalidRequestBodyError,
    handle_broad_exceptions,
    handle_invalid_request_body,
    handle_pydantic_validation_errors,
    handle_submission_validation_errors,
)
from submissions_api.routers.health import router as health_router
from submissions_api.routers.pages import router as pages_router
from submissions_api.routers.submissions import router as submissions_router
from submissions_api.services import SubmissionValidationError
from submissions_api.settings import Settings, configure_logging

# Set up logging
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BaseSubmissionStore] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    The submission store is created once here and shared by every request through
    ``app.state.store``. Pass ``store`` to skip the factory (tests, embedding).
    """
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="Submissions API",
        summary="Collect feedback form submissions",
        version="v1",
        description=dedent(
            """\
        Accepts feedback form submissions and stores each one as a JSON object in S3.

        | Route | Notes |
        | --- | --- |
        | `POST /api/submit` | JSON or form body with `name`, `email`, `message`, optional `category` |
        | `GET /api/submissions` | Most recent submissions, `limit` defaults to 10 |
        | `GET /api/health` | Reports whether storage is connected |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    # CORSMiddleware must stay outermost so error responses carry CORS headers too
    app.middleware("http")(handle_broad_exceptions)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    logger.info("initializing submission storage")
    app.state.store = store or StorageFactory.get_submission_store(settings)
    logger.info(
        "Storage status: %s",
        "Connected to S3" if app.state.store.is_configured else "Local development mode",
    )

    app.include_router(submissions_router, prefix="/api", tags=["submissions"])
    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(pages_router, tags=["pages"])

    app.add_exception_handler(
        exc_class_or_status_code=SubmissionValidationError,
        handler=handle_submission_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=InvalidRequestBodyError,
        handler=handle_invalid_request_body,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
