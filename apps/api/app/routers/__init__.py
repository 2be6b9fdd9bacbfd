"""API routers."""

from app.routers.finances import router as finances_router
from app.routers.functions import router as functions_router
from app.routers.invites import router as invites_router
from app.routers.offers import router as offers_router
from app.routers.profile import router as profile_router
from app.routers.projects import categories_router, router as projects_router

__all__ = [
    "categories_router",
    "finances_router",
    "functions_router",
    "invites_router",
    "offers_router",
    "profile_router",
    "projects_router",
]
