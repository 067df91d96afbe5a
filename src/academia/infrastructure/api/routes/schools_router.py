"""Super admin school management routes.

Mounted under ``/super-admin/schools``. Each route names the platform
permission it needs, so delegated super admins can be granted a subset.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from academia.domain.entities import Principal
from academia.domain.services.school_service import SchoolService
from academia.infrastructure.api.dependencies import DbSession, PermissionGuard
from academia.infrastructure.api.schemas import (
    CreateSchoolRequest,
    SchoolResponse,
    UpdateSchoolRequest,
)

router = APIRouter()


@router.get("", response_model=list[SchoolResponse])
async def list_schools(
    current_user: Annotated[Principal, Depends(PermissionGuard("schools:read"))],
    session: DbSession,
    school_status: Annotated[str | None, Query(alias="status")] = None,
) -> list[SchoolResponse]:
    """List schools, optionally filtered by status."""
    schools = await SchoolService(session).find_all(status=school_status)
    return [SchoolResponse.model_validate(s) for s in schools]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SchoolResponse,
    responses={409: {"description": "School code already exists"}},
)
async def create_school(
    body: CreateSchoolRequest,
    current_user: Annotated[Principal, Depends(PermissionGuard("schools:create"))],
    session: DbSession,
) -> SchoolResponse:
    school = await SchoolService(session).create(
        name=body.name,
        code=body.code,
        email=str(body.email) if body.email else None,
        address=body.address,
    )
    return SchoolResponse.model_validate(school)


@router.get(
    "/{school_id}",
    response_model=SchoolResponse,
    responses={404: {"description": "School not found"}},
)
async def get_school(
    school_id: str,
    current_user: Annotated[Principal, Depends(PermissionGuard("schools:read"))],
    session: DbSession,
) -> SchoolResponse:
    school = await SchoolService(session).find_one(school_id)
    return SchoolResponse.model_validate(school)


@router.patch(
    "/{school_id}",
    response_model=SchoolResponse,
    responses={404: {"description": "School not found"}},
)
async def update_school(
    school_id: str,
    body: UpdateSchoolRequest,
    current_user: Annotated[Principal, Depends(PermissionGuard("schools:update"))],
    session: DbSession,
) -> SchoolResponse:
    school = await SchoolService(session).update(
        school_id, **body.model_dump(exclude_unset=True, mode="json")
    )
    return SchoolResponse.model_validate(school)


@router.delete(
    "/{school_id}",
    response_model=SchoolResponse,
    responses={404: {"description": "School not found"}},
)
async def delete_school(
    school_id: str,
    current_user: Annotated[Principal, Depends(PermissionGuard("schools:delete"))],
    session: DbSession,
) -> SchoolResponse:
    """Deactivate a school. Its data is kept."""
    school = await SchoolService(session).deactivate(school_id)
    return SchoolResponse.model_validate(school)
