"""Permission catalog API routes.

Every permission placed in a delegated grant or role must come from this
catalog. Mounted under ``/super-admin/iam/permissions``.
"""

from fastapi import APIRouter, Response, status

from academia.domain.services.iam_service import IamService
from academia.infrastructure.api.dependencies import DbSession, SuperAdminUser
from academia.infrastructure.api.schemas import (
    CreatePermissionRequest,
    PermissionResponse,
    UpdatePermissionRequest,
)

router = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    current_user: SuperAdminUser,
    session: DbSession,
) -> list[PermissionResponse]:
    permissions = await IamService(session).get_all_permissions()
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PermissionResponse,
    responses={
        400: {"description": "Malformed permission name"},
        409: {"description": "Permission already exists"},
    },
)
async def create_permission(
    body: CreatePermissionRequest,
    current_user: SuperAdminUser,
    session: DbSession,
) -> PermissionResponse:
    """Add a ``resource:action`` permission to the catalog."""
    permission = await IamService(session).create_permission(body.name, body.description)
    return PermissionResponse.model_validate(permission)


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    responses={404: {"description": "Permission not found"}},
)
async def get_permission(
    permission_id: int,
    current_user: SuperAdminUser,
    session: DbSession,
) -> PermissionResponse:
    permission = await IamService(session).get_permission(permission_id)
    return PermissionResponse.model_validate(permission)


@router.patch(
    "/{permission_id}",
    response_model=PermissionResponse,
    responses={404: {"description": "Permission not found"}},
)
async def update_permission(
    permission_id: int,
    body: UpdatePermissionRequest,
    current_user: SuperAdminUser,
    session: DbSession,
) -> PermissionResponse:
    """Update a permission's description. Names cannot change."""
    permission = await IamService(session).update_permission(
        permission_id, body.description
    )
    return PermissionResponse.model_validate(permission)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Permission not found"}},
)
async def delete_permission(
    permission_id: int,
    current_user: SuperAdminUser,
    session: DbSession,
) -> Response:
    """Remove a permission from the catalog and from every role."""
    await IamService(session).delete_permission(permission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
