"""School management service.

Schools are only managed here as far as the access-control layer needs
them: super admins create, update and deactivate tenants, and school
admins maintain their own school's profile.
"""

import re
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.logging import get_logger
from academia.domain.entities import SchoolStatus
from academia.domain.exceptions import ConflictError, NotFoundError, ValidationError
from academia.infrastructure.persistence.models import SchoolModel
from academia.infrastructure.persistence.repositories import SchoolRepository

logger = get_logger(__name__)

_CODE_PATTERN = re.compile(r"^[A-Z0-9-]{2,32}$")


class SchoolService:
    """Service for school business logic."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.schools = SchoolRepository(session)

    async def find_all(self, status: str | None = None) -> list[SchoolModel]:
        return await self.schools.list_all(status=status)

    async def find_one(self, school_id: str) -> SchoolModel:
        school = await self.schools.get_by_id(school_id)
        if school is None:
            raise NotFoundError("School not found")
        return school

    async def create(
        self,
        name: str,
        code: str,
        email: str | None = None,
        address: str | None = None,
    ) -> SchoolModel:
        """Create a school.

        Raises:
            ValidationError: If the code has invalid characters.
            ConflictError: If the code is taken.
        """
        code = code.strip().upper()
        if not _CODE_PATTERN.match(code):
            raise ValidationError(
                "School code must be 2-32 characters of letters, digits and hyphens"
            )
        if await self.schools.get_by_code(code) is not None:
            raise ConflictError(f"School code '{code}' already exists")

        school = await self.schools.create(
            SchoolModel(
                id=str(uuid.uuid4()),
                name=name,
                code=code,
                email=email,
                address=address,
                status=SchoolStatus.ACTIVE.value,
            )
        )
        await self.session.commit()
        logger.info("School created", school_id=school.id, code=code)
        return school

    async def update(self, school_id: str, **changes: str | None) -> SchoolModel:
        """Update the given school fields (name, email, address, status)."""
        school = await self.find_one(school_id)
        status = changes.get("status")
        if status is not None and status not in {s.value for s in SchoolStatus}:
            raise ValidationError(f"Invalid school status '{status}'")
        for field_name in ("name", "email", "address", "status"):
            if field_name in changes and changes[field_name] is not None:
                setattr(school, field_name, changes[field_name])
        await self.session.commit()
        logger.info("School updated", school_id=school_id, fields=sorted(changes))
        return school

    async def deactivate(self, school_id: str) -> SchoolModel:
        """Take a school out of service. Tenant data is never hard-deleted."""
        school = await self.find_one(school_id)
        school.status = SchoolStatus.INACTIVE.value
        await self.session.commit()
        logger.info("School deactivated", school_id=school_id)
        return school
