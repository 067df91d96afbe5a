"""API Routes for Academia Pro."""

from academia.infrastructure.api.routes.auth_router import router as auth_router
from academia.infrastructure.api.routes.delegated_school_admins_router import (
    router as delegated_school_admins_router,
)
from academia.infrastructure.api.routes.iam_router import router as iam_router
from academia.infrastructure.api.routes.permissions_router import router as permissions_router
from academia.infrastructure.api.routes.roles_router import router as roles_router
from academia.infrastructure.api.routes.school_router import router as school_router
from academia.infrastructure.api.routes.schools_router import router as schools_router

__all__ = [
    "auth_router",
    "delegated_school_admins_router",
    "iam_router",
    "permissions_router",
    "roles_router",
    "school_router",
    "schools_router",
]
