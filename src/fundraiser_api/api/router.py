"""Root API router with /api/v1 prefix and middleware registration."""

from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fundraiser_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from fundraiser_api.api.v1.auth import router as auth_router
    from fundraiser_api.api.v1.campaigns import campaigns_router
    from fundraiser_api.api.v1.contributions import contributions_router
    from fundraiser_api.api.v1.contributors import contributors_router
    from fundraiser_api.api.v1.districts import districts_router
    from fundraiser_api.api.v1.products import products_router
    from fundraiser_api.api.v1.public import public_router
    from fundraiser_api.api.v1.schools import schools_router
    from fundraiser_api.api.v1.states import states_router
    from fundraiser_api.api.v1.teachers import teachers_router
    from fundraiser_api.api.v1.terms import terms_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(auth_router)
    root_router.include_router(states_router)
    root_router.include_router(districts_router)
    root_router.include_router(schools_router)
    root_router.include_router(teachers_router)
    root_router.include_router(campaigns_router)
    root_router.include_router(contributions_router)
    root_router.include_router(contributors_router)
    root_router.include_router(products_router)
    root_router.include_router(terms_router)
    root_router.include_router(public_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register CORS middleware for the admin UI and landing page origins.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    kwargs: dict[str, Any] = {
        "allow_credentials": True,
        "allow_methods": ["*"],
        "allow_headers": ["*"],
    }
    if settings.cors_origin_list:
        kwargs["allow_origins"] = settings.cors_origin_list
    app.add_middleware(CORSMiddleware, **kwargs)
