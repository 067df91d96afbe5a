"""Delegated account API routes.

Super admins hand out bounded slices of their permissions through
delegated accounts. Mounted under ``/super-admin/iam``.
"""

from fastapi import APIRouter, Response, status

from academia.domain.services.iam_service import IamService
from academia.infrastructure.api.dependencies import DbSession, SuperAdminUser
from academia.infrastructure.api.schemas import (
    CreateGrantRequest,
    DelegatedGrantResponse,
    GrantStatusResponse,
    UpdateGrantRequest,
)

router = APIRouter()


@router.get("/delegated-accounts", response_model=list[DelegatedGrantResponse])
async def list_delegated_accounts(
    current_user: SuperAdminUser,
    session: DbSession,
) -> list[DelegatedGrantResponse]:
    """List all delegated accounts, newest first."""
    accounts = await IamService(session).get_delegated_accounts()
    return [DelegatedGrantResponse.model_validate(a) for a in accounts]


@router.post(
    "/delegated-accounts",
    status_code=status.HTTP_201_CREATED,
    response_model=DelegatedGrantResponse,
    responses={
        400: {"description": "Unknown permission or invalid window"},
        404: {"description": "Linked user not found"},
        409: {"description": "Email already has a delegated account"},
    },
)
async def create_delegated_account(
    body: CreateGrantRequest,
    current_user: SuperAdminUser,
    session: DbSession,
) -> DelegatedGrantResponse:
    """Create a delegated account for an existing or new user."""
    account = await IamService(session).create_delegated_account(
        body.to_draft(), created_by=current_user.id
    )
    return DelegatedGrantResponse.model_validate(account)


@router.get(
    "/delegated-accounts/{account_id}",
    response_model=DelegatedGrantResponse,
    responses={404: {"description": "Delegated account not found"}},
)
async def get_delegated_account(
    account_id: str,
    current_user: SuperAdminUser,
    session: DbSession,
) -> DelegatedGrantResponse:
    account = await IamService(session).get_delegated_account(account_id)
    return DelegatedGrantResponse.model_validate(account)


@router.patch(
    "/delegated-accounts/{account_id}",
    response_model=DelegatedGrantResponse,
    responses={
        400: {"description": "Unknown permission or invalid window"},
        404: {"description": "Delegated account not found"},
    },
)
async def update_delegated_account(
    account_id: str,
    body: UpdateGrantRequest,
    current_user: SuperAdminUser,
    session: DbSession,
) -> DelegatedGrantResponse:
    """Partially update a delegated account and reconcile its status."""
    account = await IamService(session).update_delegated_account(
        account_id, body.to_changes()
    )
    return DelegatedGrantResponse.model_validate(account)


@router.delete(
    "/delegated-accounts/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Delegated account not found"}},
)
async def delete_delegated_account(
    account_id: str,
    current_user: SuperAdminUser,
    session: DbSession,
) -> Response:
    await IamService(session).delete_delegated_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/delegated-accounts/{account_id}/revoke",
    response_model=DelegatedGrantResponse,
    responses={409: {"description": "Already revoked"}},
)
async def revoke_delegated_account(
    account_id: str,
    current_user: SuperAdminUser,
    session: DbSession,
) -> DelegatedGrantResponse:
    """Revoke a delegated account permanently."""
    account = await IamService(session).revoke_delegated_account(
        account_id, revoked_by=current_user.id
    )
    return DelegatedGrantResponse.model_validate(account)


@router.post(
    "/delegated-accounts/{account_id}/suspend",
    response_model=DelegatedGrantResponse,
    responses={409: {"description": "Grant is revoked or expired"}},
)
async def suspend_delegated_account(
    account_id: str,
    current_user: SuperAdminUser,
    session: DbSession,
) -> DelegatedGrantResponse:
    account = await IamService(session).suspend_delegated_account(account_id)
    return DelegatedGrantResponse.model_validate(account)


@router.post(
    "/delegated-accounts/{account_id}/unsuspend",
    response_model=DelegatedGrantResponse,
    responses={409: {"description": "Grant is not suspended"}},
)
async def unsuspend_delegated_account(
    account_id: str,
    current_user: SuperAdminUser,
    session: DbSession,
) -> DelegatedGrantResponse:
    """Lift a suspension. The new status follows the validity window."""
    account = await IamService(session).unsuspend_delegated_account(account_id)
    return DelegatedGrantResponse.model_validate(account)


@router.get(
    "/delegated-accounts/{account_id}/status",
    response_model=GrantStatusResponse,
)
async def get_delegated_account_status(
    account_id: str,
    current_user: SuperAdminUser,
    session: DbSession,
) -> GrantStatusResponse:
    """Return the account's effective status, persisting any change."""
    service = IamService(session)
    account = await service.get_delegated_account(account_id)
    effective = await service.get_effective_status(account)
    return GrantStatusResponse(id=account.id, status=effective.value)
