"""Role API routes.

Roles bundle catalog permissions under a name. Mounted under
``/super-admin/iam/roles``.
"""

from fastapi import APIRouter, Response, status

from academia.domain.services.iam_service import IamService
from academia.infrastructure.api.dependencies import DbSession, SuperAdminUser
from academia.infrastructure.api.schemas import (
    CreateRoleRequest,
    RoleResponse,
    UpdateRoleRequest,
)

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    current_user: SuperAdminUser,
    session: DbSession,
) -> list[RoleResponse]:
    roles = await IamService(session).get_roles()
    return [RoleResponse.model_validate(r) for r in roles]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=RoleResponse,
    responses={
        400: {"description": "Unknown permission"},
        409: {"description": "Role name already exists"},
    },
)
async def create_role(
    body: CreateRoleRequest,
    current_user: SuperAdminUser,
    session: DbSession,
) -> RoleResponse:
    role = await IamService(session).create_role(
        body.name, body.description, body.permissions
    )
    return RoleResponse.model_validate(role)


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    responses={404: {"description": "Role not found"}},
)
async def get_role(
    role_id: int,
    current_user: SuperAdminUser,
    session: DbSession,
) -> RoleResponse:
    role = await IamService(session).get_role(role_id)
    return RoleResponse.model_validate(role)


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    responses={
        404: {"description": "Role not found"},
        409: {"description": "Role name already exists"},
    },
)
async def update_role(
    role_id: int,
    body: UpdateRoleRequest,
    current_user: SuperAdminUser,
    session: DbSession,
) -> RoleResponse:
    role = await IamService(session).update_role(
        role_id,
        name=body.name,
        description=body.description,
        permission_names=body.permissions,
    )
    return RoleResponse.model_validate(role)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Role not found"}},
)
async def delete_role(
    role_id: int,
    current_user: SuperAdminUser,
    session: DbSession,
) -> Response:
    await IamService(session).delete_role(role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
