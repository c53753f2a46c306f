"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from fundraiser_api import __version__
from fundraiser_api.core.config import get_settings
from fundraiser_api.core.database import dispose_engine, init_engine
from fundraiser_api.core.logging import setup_logging
from fundraiser_api.lib.consistency import (
    DestroyGuardError,
    FieldError,
    FieldValidationError,
    MissingAssociationError,
    RecordNotFoundError,
    SlugGenerationError,
    UniquenessRaceError,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    yield
    await dispose_engine()


def register_exception_handlers(app: FastAPI) -> None:
    """Map the campaign error taxonomy onto HTTP responses.

    Args:
        app: The FastAPI application.
    """

    @app.exception_handler(UniquenessRaceError)
    async def uniqueness_race_handler(request: Request, exc: UniquenessRaceError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": "A concurrent change claimed this value first; retry the request",
                "code": exc.errors[0].code.value,
                "errors": [e.as_dict() for e in exc.errors],
                "retryable": True,
            },
        )

    @app.exception_handler(FieldValidationError)
    async def field_validation_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Validation failed",
                "code": exc.errors[0].code.value if exc.errors else None,
                "errors": [e.as_dict() for e in exc.errors],
            },
        )

    @app.exception_handler(MissingAssociationError)
    async def missing_association_handler(request: Request, exc: MissingAssociationError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": str(exc),
                "code": exc.codes[0].value if exc.codes else None,
                "errors": [FieldError.of(f, c).as_dict() for f, c in zip(exc.fields, exc.codes, strict=True)],
            },
        )

    @app.exception_handler(DestroyGuardError)
    async def destroy_guard_handler(request: Request, exc: DestroyGuardError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": str(exc),
                "code": exc.code.value,
                "codes": [c.value for c in exc.codes],
            },
        )

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(SlugGenerationError)
    async def slug_generation_handler(request: Request, exc: SlugGenerationError) -> JSONResponse:
        logger.error(f"Slug generation failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Fundraiser API",
        description="School fundraising campaigns with hierarchy-consistent validation",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    from fundraiser_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
