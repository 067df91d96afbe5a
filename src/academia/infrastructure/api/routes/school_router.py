"""Tenant routes for the caller's current school.

The school is resolved per request by the school context guard, from the
``x-school-id`` header or the request itself.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from academia.domain.entities import RequestContext
from academia.domain.services.school_service import SchoolService
from academia.infrastructure.api.dependencies import (
    DbSession,
    SchoolPermissionGuard,
    TenantContext,
    require_school_context,
)
from academia.infrastructure.api.schemas import (
    SchoolContextResponse,
    SchoolResponse,
    SchoolSummary,
    UpdateSchoolRequest,
)

router = APIRouter(dependencies=[Depends(require_school_context)])


@router.get("/context", response_model=SchoolContextResponse)
async def get_context(context: TenantContext) -> SchoolContextResponse:
    """Describe the resolved school and the caller's standing in it."""
    school_context = context.school_context
    return SchoolContextResponse(
        school_id=school_context.school_id,
        school=SchoolSummary.model_validate(school_context.school),
        user_role=school_context.user_role,
        permissions=sorted(school_context.permissions),
        is_super_admin=school_context.is_super_admin,
        is_school_admin=school_context.is_school_admin,
    )


@router.get("", response_model=SchoolResponse)
async def get_school(
    context: Annotated[RequestContext, Depends(SchoolPermissionGuard("schools:read"))],
    session: DbSession,
) -> SchoolResponse:
    school = await SchoolService(session).find_one(context.school_id)
    return SchoolResponse.model_validate(school)


@router.patch("", response_model=SchoolResponse)
async def update_school(
    body: UpdateSchoolRequest,
    context: Annotated[RequestContext, Depends(SchoolPermissionGuard("schools:update"))],
    session: DbSession,
) -> SchoolResponse:
    """Update the school's profile. Status changes are reserved for super admins."""
    changes = body.model_dump(exclude_unset=True, exclude={"status"}, mode="json")
    school = await SchoolService(session).update(context.school_id, **changes)
    return SchoolResponse.model_validate(school)
