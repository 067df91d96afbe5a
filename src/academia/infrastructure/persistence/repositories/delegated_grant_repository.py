"""Repositories for delegated accounts and delegated school admins."""

from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from academia.infrastructure.persistence.models import (
    DelegatedAccountModel,
    DelegatedSchoolAdminModel,
)


class DelegatedAccountRepository:
    """Repository for cross-school delegated accounts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, account: DelegatedAccountModel) -> DelegatedAccountModel:
        account.email = account.email.strip().lower()
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: str) -> DelegatedAccountModel | None:
        result = await self.session.execute(
            select(DelegatedAccountModel).where(DelegatedAccountModel.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> DelegatedAccountModel | None:
        """Get the grant issued to ``email``, ignoring case."""
        result = await self.session.execute(
            select(DelegatedAccountModel).where(
                func.lower(DelegatedAccountModel.email) == email.strip().lower()
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[DelegatedAccountModel]:
        """List all delegated accounts, newest first."""
        result = await self.session.execute(
            select(DelegatedAccountModel).order_by(DelegatedAccountModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def set_status(self, account_id: str, status: str) -> None:
        """Write a new stored status with a single-row update."""
        await self.session.execute(
            update(DelegatedAccountModel)
            .where(DelegatedAccountModel.id == account_id)
            .values(status=status, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()

    async def delete(self, account: DelegatedAccountModel) -> None:
        await self.session.delete(account)
        await self.session.flush()


class DelegatedSchoolAdminRepository:
    """Repository for single-school delegated admins.

    Every lookup by ID is scoped by school so one tenant can never reach
    another tenant's grants.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, grant: DelegatedSchoolAdminModel) -> DelegatedSchoolAdminModel:
        grant.email = grant.email.strip().lower()
        self.session.add(grant)
        await self.session.flush()
        return grant

    async def get_by_id(
        self, grant_id: str, school_id: str
    ) -> DelegatedSchoolAdminModel | None:
        result = await self.session.execute(
            select(DelegatedSchoolAdminModel).where(
                DelegatedSchoolAdminModel.id == grant_id,
                DelegatedSchoolAdminModel.school_id == school_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> DelegatedSchoolAdminModel | None:
        result = await self.session.execute(
            select(DelegatedSchoolAdminModel).where(
                func.lower(DelegatedSchoolAdminModel.email) == email.strip().lower()
            )
        )
        return result.scalar_one_or_none()

    async def get_by_email_and_school(
        self, email: str, school_id: str
    ) -> DelegatedSchoolAdminModel | None:
        result = await self.session.execute(
            select(DelegatedSchoolAdminModel).where(
                func.lower(DelegatedSchoolAdminModel.email) == email.strip().lower(),
                DelegatedSchoolAdminModel.school_id == school_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_school(self, school_id: str) -> list[DelegatedSchoolAdminModel]:
        """List a school's delegated admins, newest first."""
        result = await self.session.execute(
            select(DelegatedSchoolAdminModel)
            .where(DelegatedSchoolAdminModel.school_id == school_id)
            .order_by(DelegatedSchoolAdminModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def set_status(self, grant_id: str, status: str) -> None:
        """Write a new stored status with a single-row update."""
        await self.session.execute(
            update(DelegatedSchoolAdminModel)
            .where(DelegatedSchoolAdminModel.id == grant_id)
            .values(status=status, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()

    async def delete(self, grant: DelegatedSchoolAdminModel) -> None:
        await self.session.delete(grant)
        await self.session.flush()
