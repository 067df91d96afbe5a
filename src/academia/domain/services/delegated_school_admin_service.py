"""Delegated school admin service.

A delegated school admin grant lets a member of one school act with a
bounded set of permissions inside that school only. Every operation is
scoped by ``school_id``; a grant belonging to another school is reported
as not found.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.logging import get_logger
from academia.domain.entities import GrantStatus, UserRole, UserStatus
from academia.domain.exceptions import ConflictError, NotFoundError, ValidationError
from academia.domain.services.grant_lifecycle import (
    GrantChanges,
    GrantDraft,
    apply_expiry_change,
    ensure_revocable,
    reconcile_status,
    resolve_expiry,
    suspended_status,
    unsuspended_status,
    validate_window,
)
from academia.domain.services.iam_service import IamService
from academia.domain.services.permission_matcher import grant_covers
from academia.infrastructure.persistence.models import (
    DelegatedSchoolAdminModel,
    UserModel,
)
from academia.infrastructure.persistence.repositories import (
    DelegatedSchoolAdminRepository,
    SchoolRepository,
    UserRepository,
)

logger = get_logger(__name__)


class DelegatedSchoolAdminService:
    """Service for single-school delegated admin grants."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.grants = DelegatedSchoolAdminRepository(session)
        self.schools = SchoolRepository(session)
        self.users = UserRepository(session)
        self.iam = IamService(session)

    async def _resolve_owner(self, school_id: str, draft: GrantDraft) -> UserModel:
        email = draft.email.strip().lower()
        if draft.user_id:
            user = await self.users.get_by_id(draft.user_id)
            if user is None:
                raise NotFoundError("User not found")
            if user.school_id != school_id:
                raise ValidationError("User does not belong to the specified school")
            return user

        if draft.first_name and draft.last_name:
            if await self.users.email_exists(email):
                raise ConflictError("A user with this email already exists")
            return await self.users.create(
                UserModel(
                    id=str(uuid.uuid4()),
                    email=email,
                    first_name=draft.first_name,
                    last_name=draft.last_name,
                    middle_name=draft.middle_name,
                    roles=[UserRole.DELEGATED_SCHOOL_ADMIN.value],
                    status=UserStatus.ACTIVE.value,
                    school_id=school_id,
                    is_email_verified=True,
                    password_hash=None,
                )
            )

        raise ValidationError(
            "Either userId or user details (firstName, lastName) must be provided"
        )

    async def create(
        self, school_id: str, draft: GrantDraft, created_by: str | None
    ) -> DelegatedSchoolAdminModel:
        """Create a delegated school admin.

        Args:
            school_id: School the grant is scoped to.
            draft: Grant details.
            created_by: ID of the user issuing the grant.

        Returns:
            The persisted grant.

        Raises:
            ConflictError: If a grant already exists for the email.
            UnknownPermissionError: If a permission is not in the catalog.
            NotFoundError: If the school or the linked user does not exist.
            ValidationError: If the linked user belongs to another school.
        """
        if await self.grants.get_by_email(draft.email) is not None:
            raise ConflictError("Delegated school admin with this email already exists")

        await self.iam.validate_permissions(draft.permissions)

        if await self.schools.get_by_id(school_id) is None:
            raise NotFoundError("School not found")

        expiry_date = resolve_expiry(draft.end_date, draft.end_time, draft.expiry_date)
        validate_window(draft.start_date, expiry_date)

        user = await self._resolve_owner(school_id, draft)

        grant = await self.grants.create(
            DelegatedSchoolAdminModel(
                id=str(uuid.uuid4()),
                user_id=user.id,
                school_id=school_id,
                email=user.email,
                permissions=list(draft.permissions),
                start_date=draft.start_date,
                expiry_date=expiry_date,
                status=GrantStatus.ACTIVE.value,
                notes=draft.notes,
                created_by=created_by,
            )
        )
        await reconcile_status(grant, self.grants)
        await self.session.commit()

        logger.info(
            "Delegated school admin created",
            grant_id=grant.id,
            school_id=school_id,
            email=grant.email,
            status=grant.status,
            created_by=created_by,
        )
        return grant

    async def list_for_school(self, school_id: str) -> list[DelegatedSchoolAdminModel]:
        return await self.grants.list_for_school(school_id)

    async def get(self, grant_id: str, school_id: str) -> DelegatedSchoolAdminModel:
        grant = await self.grants.get_by_id(grant_id, school_id)
        if grant is None:
            raise NotFoundError("Delegated school admin not found")
        return grant

    async def update(
        self, grant_id: str, school_id: str, changes: GrantChanges
    ) -> DelegatedSchoolAdminModel:
        grant = await self.get(grant_id, school_id)

        if "permissions" in changes.provided and changes.permissions is not None:
            await self.iam.validate_permissions(changes.permissions)
            grant.permissions = list(changes.permissions)
        if "start_date" in changes.provided:
            grant.start_date = changes.start_date
        grant.expiry_date = apply_expiry_change(grant.expiry_date, changes)
        if "notes" in changes.provided:
            grant.notes = changes.notes
        validate_window(grant.start_date, grant.expiry_date)

        await self.session.flush()
        await reconcile_status(grant, self.grants)
        await self.session.commit()
        logger.info(
            "Delegated school admin updated",
            grant_id=grant_id,
            school_id=school_id,
            fields=sorted(changes.provided),
        )
        return grant

    async def revoke(
        self, grant_id: str, school_id: str, revoked_by: str | None
    ) -> DelegatedSchoolAdminModel:
        grant = await self.get(grant_id, school_id)
        ensure_revocable(grant.status)
        grant.status = GrantStatus.REVOKED.value
        grant.revoked_by = revoked_by
        grant.revoked_at = datetime.now(timezone.utc)
        await self.session.commit()
        logger.info("Delegated school admin revoked", grant_id=grant_id, revoked_by=revoked_by)
        return grant

    async def suspend(self, grant_id: str, school_id: str) -> DelegatedSchoolAdminModel:
        grant = await self.get(grant_id, school_id)
        grant.status = suspended_status(grant.status)
        await self.session.commit()
        logger.info("Delegated school admin suspended", grant_id=grant_id)
        return grant

    async def unsuspend(self, grant_id: str, school_id: str) -> DelegatedSchoolAdminModel:
        grant = await self.get(grant_id, school_id)
        grant.status = unsuspended_status(grant)
        await self.session.commit()
        logger.info("Delegated school admin unsuspended", grant_id=grant_id, status=grant.status)
        return grant

    async def delete(self, grant_id: str, school_id: str) -> None:
        grant = await self.get(grant_id, school_id)
        await self.grants.delete(grant)
        await self.session.commit()
        logger.info("Delegated school admin deleted", grant_id=grant_id, school_id=school_id)

    async def get_effective_status(self, grant: DelegatedSchoolAdminModel) -> GrantStatus:
        """Return the grant's effective status, writing it back if it changed."""
        status = await reconcile_status(grant, self.grants)
        await self.session.commit()
        return status

    async def check_delegated_school_admin_access(
        self, email: str, school_id: str, required_permission: str
    ) -> bool:
        """Check whether ``email`` holds ``required_permission`` in ``school_id``.

        Returns:
            True if a grant exists for this email in this school, is
            effectively active, and covers the permission.
        """
        grant = await self.grants.get_by_email_and_school(email, school_id)
        if grant is None:
            return False
        if await self.get_effective_status(grant) is not GrantStatus.ACTIVE:
            return False
        return grant_covers(grant.permissions or [], required_permission)
