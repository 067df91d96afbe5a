"""Permission catalog repository for database operations."""

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from academia.infrastructure.persistence.models import PermissionModel, RolePermissionModel


class PermissionRepository:
    """Repository for the permissions catalog."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, permission: PermissionModel) -> PermissionModel:
        self.session.add(permission)
        await self.session.flush()
        return permission

    async def get_by_id(self, permission_id: int) -> PermissionModel | None:
        result = await self.session.execute(
            select(PermissionModel).where(PermissionModel.id == permission_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> PermissionModel | None:
        result = await self.session.execute(
            select(PermissionModel).where(PermissionModel.name == name)
        )
        return result.scalar_one_or_none()

    async def get_by_names(self, names: Iterable[str]) -> list[PermissionModel]:
        """Fetch every catalog entry whose name is in ``names``."""
        names = list(names)
        if not names:
            return []
        result = await self.session.execute(
            select(PermissionModel).where(PermissionModel.name.in_(names))
        )
        return list(result.scalars().all())

    async def get_by_ids(self, ids: Iterable[int]) -> list[PermissionModel]:
        ids = list(ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(PermissionModel).where(PermissionModel.id.in_(ids))
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[PermissionModel]:
        """List the whole catalog ordered by resource, then action."""
        result = await self.session.execute(
            select(PermissionModel).order_by(PermissionModel.resource, PermissionModel.action)
        )
        return list(result.scalars().all())

    async def delete(self, permission: PermissionModel) -> None:
        """Delete a permission and unlink it from every role."""
        await self.session.execute(
            delete(RolePermissionModel).where(
                RolePermissionModel.permission_id == permission.id
            )
        )
        await self.session.delete(permission)
        await self.session.flush()
