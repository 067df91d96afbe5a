"""School context resolution.

Decides which school a request operates in and what the caller may do
there. ``validate_school_access`` is the tenant isolation check: outside
super admins, users only ever reach their own school.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.logging import get_logger
from academia.domain.entities import School, SchoolContext, SchoolStatus, UserRole
from academia.domain.services.role_permissions import derive_permissions
from academia.infrastructure.persistence.models import SchoolModel
from academia.infrastructure.persistence.repositories import SchoolRepository, UserRepository

logger = get_logger(__name__)


def school_from_model(model: SchoolModel) -> School:
    return School(id=model.id, name=model.name, code=model.code, status=model.status)


class SchoolContextService:
    """Resolve and validate per-request school contexts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.users = UserRepository(session)
        self.schools = SchoolRepository(session)

    async def get_school_context(
        self, user_id: str, school_id: str | None = None
    ) -> SchoolContext | None:
        """Build the school context for a user.

        An explicit ``school_id`` is loaded as-is, which is how super admins
        reach other schools; otherwise the user's own school is used.
        Whether the user may actually enter the school is decided separately
        by ``validate_school_access``.

        Args:
            user_id: ID of the calling user.
            school_id: Requested school, if any.

        Returns:
            The context, or None if the user or school cannot be found, or
            no school was requested and the user has none.
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            return None

        if school_id:
            school = await self.schools.get_by_id(school_id)
        elif user.school_id:
            school = await self.schools.get_by_id(user.school_id)
        else:
            return None

        if school is None:
            logger.debug("School not found for context", user_id=user_id, school_id=school_id)
            return None

        role = user.role
        return SchoolContext(
            school_id=school.id,
            school=school_from_model(school),
            user_role=role,
            permissions=derive_permissions(role, school.id),
            is_super_admin=role == UserRole.SUPER_ADMIN.value,
            is_school_admin=(
                role == UserRole.SCHOOL_ADMIN.value and user.school_id == school.id
            ),
        )

    async def validate_school_access(self, user_id: str, school_id: str) -> bool:
        """Check whether a user may operate within a school.

        Super admins may enter any school ID, even one with no matching row.
        Everyone else may only enter the school they belong to.
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            return False
        if UserRole.SUPER_ADMIN.value in (user.roles or []):
            return True
        return user.school_id is not None and user.school_id == school_id

    async def get_accessible_schools(self, user_id: str) -> list[School]:
        """List the schools a user can enter.

        Super admins see every active school; other users see their own.
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            return []
        if UserRole.SUPER_ADMIN.value in (user.roles or []):
            schools = await self.schools.list_all(status=SchoolStatus.ACTIVE.value)
            return [school_from_model(s) for s in schools]
        if user.school_id:
            school = await self.schools.get_by_id(user.school_id)
            if school is not None:
                return [school_from_model(school)]
        return []
