"""Typed per-request state built by the middleware and guard chain."""

from dataclasses import dataclass, replace

from academia.domain.entities.auth_result import Anonymous, Authenticated, AuthResult
from academia.domain.entities.school_context import SchoolContext
from academia.domain.entities.user import Principal


@dataclass(frozen=True)
class RequestContext:
    """What the pipeline has established about the current request.

    Attributes:
        auth: Result of session authentication.
        school_context: Resolved tenant scope, if the route is tenant-scoped.
        school_id: ID of the resolved tenant.
    """

    auth: AuthResult = Anonymous()
    school_context: SchoolContext | None = None
    school_id: str | None = None

    @property
    def user(self) -> Principal | None:
        if isinstance(self.auth, Authenticated):
            return self.auth.principal
        return None

    def with_school(self, school_context: SchoolContext) -> "RequestContext":
        return replace(
            self,
            school_context=school_context,
            school_id=school_context.school_id,
        )
