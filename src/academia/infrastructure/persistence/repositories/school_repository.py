"""School repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academia.infrastructure.persistence.models import SchoolModel


class SchoolRepository:
    """Repository for school database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, school: SchoolModel) -> SchoolModel:
        self.session.add(school)
        await self.session.flush()
        return school

    async def get_by_id(self, school_id: str) -> SchoolModel | None:
        """Get a school by ID.

        Args:
            school_id: School ID (UUID string).

        Returns:
            School model if found, None otherwise.
        """
        result = await self.session.execute(
            select(SchoolModel).where(SchoolModel.id == school_id)
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> SchoolModel | None:
        result = await self.session.execute(
            select(SchoolModel).where(SchoolModel.code == code.upper())
        )
        return result.scalar_one_or_none()

    async def list_all(self, status: str | None = None) -> list[SchoolModel]:
        """List schools ordered by name.

        Args:
            status: Only return schools with this status, if given.

        Returns:
            List of school models.
        """
        query = select(SchoolModel).order_by(SchoolModel.name)
        if status is not None:
            query = query.where(SchoolModel.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())
