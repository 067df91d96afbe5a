"""Delegated school admin routes.

School admins delegate bounded, school-scoped permissions to other members
of their school. Mounted under ``/school/delegated-admins``; every route is
tenant-scoped by the school context guard.
"""

from fastapi import APIRouter, Depends, Response, status

from academia.domain.entities import UserRole
from academia.domain.services.delegated_school_admin_service import (
    DelegatedSchoolAdminService,
)
from academia.infrastructure.api.dependencies import (
    AuthenticatedUser,
    DbSession,
    RolesGuard,
    TenantContext,
    require_school_context,
)
from academia.infrastructure.api.schemas import (
    CreateGrantRequest,
    DelegatedSchoolAdminResponse,
    GrantStatusResponse,
    UpdateGrantRequest,
)

router = APIRouter(
    dependencies=[
        Depends(require_school_context),
        Depends(RolesGuard(UserRole.SCHOOL_ADMIN)),
    ]
)


@router.get("", response_model=list[DelegatedSchoolAdminResponse])
async def list_delegated_admins(
    context: TenantContext,
    session: DbSession,
) -> list[DelegatedSchoolAdminResponse]:
    """List the school's delegated admins, newest first."""
    grants = await DelegatedSchoolAdminService(session).list_for_school(context.school_id)
    return [DelegatedSchoolAdminResponse.model_validate(g) for g in grants]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=DelegatedSchoolAdminResponse,
    responses={
        400: {"description": "Unknown permission, invalid window or foreign user"},
        409: {"description": "Email already has a delegated school admin grant"},
    },
)
async def create_delegated_admin(
    body: CreateGrantRequest,
    context: TenantContext,
    current_user: AuthenticatedUser,
    session: DbSession,
) -> DelegatedSchoolAdminResponse:
    grant = await DelegatedSchoolAdminService(session).create(
        context.school_id, body.to_draft(), created_by=current_user.id
    )
    return DelegatedSchoolAdminResponse.model_validate(grant)


@router.get(
    "/{grant_id}",
    response_model=DelegatedSchoolAdminResponse,
    responses={404: {"description": "Delegated school admin not found"}},
)
async def get_delegated_admin(
    grant_id: str,
    context: TenantContext,
    session: DbSession,
) -> DelegatedSchoolAdminResponse:
    grant = await DelegatedSchoolAdminService(session).get(grant_id, context.school_id)
    return DelegatedSchoolAdminResponse.model_validate(grant)


@router.patch("/{grant_id}", response_model=DelegatedSchoolAdminResponse)
async def update_delegated_admin(
    grant_id: str,
    body: UpdateGrantRequest,
    context: TenantContext,
    session: DbSession,
) -> DelegatedSchoolAdminResponse:
    grant = await DelegatedSchoolAdminService(session).update(
        grant_id, context.school_id, body.to_changes()
    )
    return DelegatedSchoolAdminResponse.model_validate(grant)


@router.delete("/{grant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_delegated_admin(
    grant_id: str,
    context: TenantContext,
    session: DbSession,
) -> Response:
    await DelegatedSchoolAdminService(session).delete(grant_id, context.school_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{grant_id}/revoke", response_model=DelegatedSchoolAdminResponse)
async def revoke_delegated_admin(
    grant_id: str,
    context: TenantContext,
    current_user: AuthenticatedUser,
    session: DbSession,
) -> DelegatedSchoolAdminResponse:
    grant = await DelegatedSchoolAdminService(session).revoke(
        grant_id, context.school_id, revoked_by=current_user.id
    )
    return DelegatedSchoolAdminResponse.model_validate(grant)


@router.post("/{grant_id}/suspend", response_model=DelegatedSchoolAdminResponse)
async def suspend_delegated_admin(
    grant_id: str,
    context: TenantContext,
    session: DbSession,
) -> DelegatedSchoolAdminResponse:
    grant = await DelegatedSchoolAdminService(session).suspend(grant_id, context.school_id)
    return DelegatedSchoolAdminResponse.model_validate(grant)


@router.post("/{grant_id}/unsuspend", response_model=DelegatedSchoolAdminResponse)
async def unsuspend_delegated_admin(
    grant_id: str,
    context: TenantContext,
    session: DbSession,
) -> DelegatedSchoolAdminResponse:
    grant = await DelegatedSchoolAdminService(session).unsuspend(grant_id, context.school_id)
    return DelegatedSchoolAdminResponse.model_validate(grant)


@router.get("/{grant_id}/status", response_model=GrantStatusResponse)
async def get_delegated_admin_status(
    grant_id: str,
    context: TenantContext,
    session: DbSession,
) -> GrantStatusResponse:
    """Return the grant's effective status, persisting any change."""
    service = DelegatedSchoolAdminService(session)
    grant = await service.get(grant_id, context.school_id)
    effective = await service.get_effective_status(grant)
    return GrantStatusResponse(id=grant.id, status=effective.value)
