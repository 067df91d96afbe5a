"""Identity and access management service.

Owns the permission catalog, roles, and cross-school delegated accounts.
A delegated account lets its holder act with a bounded subset of super
admin permissions, optionally within a validity window.
"""

import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.logging import get_logger
from academia.domain.entities import GrantStatus, UserRole, UserStatus
from academia.domain.exceptions import (
    ConflictError,
    NotFoundError,
    UnknownPermissionError,
    ValidationError,
)
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
from academia.domain.services.permission_matcher import grant_covers, split_permission
from academia.infrastructure.persistence.models import (
    DelegatedAccountModel,
    PermissionModel,
    RoleModel,
    UserModel,
)
from academia.infrastructure.persistence.repositories import (
    DelegatedAccountRepository,
    PermissionRepository,
    RoleRepository,
    UserRepository,
)

logger = get_logger(__name__)


class IamService:
    """Service for delegated accounts, the permission catalog and roles."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the IAM service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.accounts = DelegatedAccountRepository(session)
        self.permissions = PermissionRepository(session)
        self.roles = RoleRepository(session)
        self.users = UserRepository(session)

    # ------------------------------------------------------------------
    # Permission catalog
    # ------------------------------------------------------------------

    async def validate_permissions(self, names: Iterable[str]) -> None:
        """Ensure every permission name exists in the catalog.

        Raises:
            UnknownPermissionError: Naming the first missing permission.
        """
        names = list(names)
        known = {p.name for p in await self.permissions.get_by_names(names)}
        for name in names:
            if name not in known:
                raise UnknownPermissionError(name)

    async def get_all_permissions(self) -> list[PermissionModel]:
        return await self.permissions.list_all()

    async def get_permission(self, permission_id: int) -> PermissionModel:
        permission = await self.permissions.get_by_id(permission_id)
        if permission is None:
            raise NotFoundError(f"Permission {permission_id} not found")
        return permission

    async def create_permission(
        self, name: str, description: str | None = None
    ) -> PermissionModel:
        """Add a permission to the catalog.

        Raises:
            ValidationError: If the name is not ``resource:action``.
            ConflictError: If the name already exists.
        """
        try:
            resource, action = split_permission(name)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if not action and name != "*":
            raise ValidationError("Permission name must have the form resource:action")
        if await self.permissions.get_by_name(name) is not None:
            raise ConflictError(f"Permission '{name}' already exists")

        permission = await self.permissions.create(
            PermissionModel(
                name=name,
                resource=resource,
                action=action or "*",
                description=description,
            )
        )
        await self.session.commit()
        logger.info("Permission created", permission=name)
        return permission

    async def update_permission(
        self, permission_id: int, description: str | None
    ) -> PermissionModel:
        """Update a permission's description. Names are immutable."""
        permission = await self.get_permission(permission_id)
        permission.description = description
        await self.session.commit()
        return permission

    async def delete_permission(self, permission_id: int) -> None:
        permission = await self.get_permission(permission_id)
        await self.permissions.delete(permission)
        await self.session.commit()
        logger.info("Permission deleted", permission=permission.name)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    async def get_roles(self) -> list[RoleModel]:
        return await self.roles.list_all()

    async def get_role(self, role_id: int) -> RoleModel:
        role = await self.roles.get_by_id(role_id)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    async def _resolve_permissions(self, names: list[str]) -> list[PermissionModel]:
        await self.validate_permissions(names)
        return await self.permissions.get_by_names(names)

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        permission_names: list[str] | None = None,
    ) -> RoleModel:
        """Create a role bundling catalog permissions.

        Raises:
            ConflictError: If a role with this name exists.
            UnknownPermissionError: If a permission is not in the catalog.
        """
        if await self.roles.get_by_name(name) is not None:
            raise ConflictError(f"Role '{name}' already exists")
        permissions = await self._resolve_permissions(permission_names or [])
        role = await self.roles.create(
            RoleModel(name=name, description=description, permissions=permissions)
        )
        await self.session.commit()
        logger.info("Role created", role_name=name, permissions=len(permissions))
        return role

    async def update_role(
        self,
        role_id: int,
        name: str | None = None,
        description: str | None = None,
        permission_names: list[str] | None = None,
    ) -> RoleModel:
        """Rename a role, change its description, or replace its permissions."""
        role = await self.get_role(role_id)
        if name is not None and name != role.name:
            if await self.roles.get_by_name(name) is not None:
                raise ConflictError(f"Role '{name}' already exists")
            role.name = name
        if description is not None:
            role.description = description
        if permission_names is not None:
            role.permissions = await self._resolve_permissions(permission_names)
        await self.session.commit()
        return role

    async def delete_role(self, role_id: int) -> None:
        role = await self.get_role(role_id)
        await self.roles.delete(role)
        await self.session.commit()
        logger.info("Role deleted", role_name=role.name)

    # ------------------------------------------------------------------
    # Delegated accounts
    # ------------------------------------------------------------------

    async def _resolve_owner(self, draft: GrantDraft) -> UserModel:
        email = draft.email.strip().lower()
        if draft.user_id:
            user = await self.users.get_by_id(draft.user_id)
            if user is None:
                raise NotFoundError("User not found")
            if user.email != email:
                raise ValidationError("Email does not match the linked user")
            return user

        if draft.first_name and draft.last_name:
            if await self.users.email_exists(email):
                raise ConflictError("A user with this email already exists")
            # Holders without a linked user get a password-less account
            return await self.users.create(
                UserModel(
                    id=str(uuid.uuid4()),
                    email=email,
                    first_name=draft.first_name,
                    last_name=draft.last_name,
                    middle_name=draft.middle_name,
                    roles=[
                        UserRole.SCHOOL_ADMIN.value,
                        UserRole.DELEGATED_SUPER_ADMIN.value,
                    ],
                    status=UserStatus.ACTIVE.value,
                    is_email_verified=True,
                    password_hash=None,
                )
            )

        raise ValidationError(
            "Either userId or user details (firstName, lastName) must be provided"
        )

    async def create_delegated_account(
        self, draft: GrantDraft, created_by: str | None
    ) -> DelegatedAccountModel:
        """Create a delegated account.

        Args:
            draft: Grant details.
            created_by: ID of the super admin issuing the grant.

        Returns:
            The persisted grant.

        Raises:
            ConflictError: If a delegated account already exists for the email.
            UnknownPermissionError: If a permission is not in the catalog.
            ValidationError: If neither a user nor user details are given.
            NotFoundError: If ``user_id`` does not exist.
        """
        if await self.accounts.get_by_email(draft.email) is not None:
            raise ConflictError("Delegated account with this email already exists")

        await self.validate_permissions(draft.permissions)

        expiry_date = resolve_expiry(draft.end_date, draft.end_time, draft.expiry_date)
        validate_window(draft.start_date, expiry_date)

        user = await self._resolve_owner(draft)

        account = await self.accounts.create(
            DelegatedAccountModel(
                id=str(uuid.uuid4()),
                user_id=user.id,
                email=user.email,
                permissions=list(draft.permissions),
                start_date=draft.start_date,
                expiry_date=expiry_date,
                status=GrantStatus.ACTIVE.value,
                notes=draft.notes,
                created_by=created_by,
            )
        )
        await reconcile_status(account, self.accounts)
        await self.session.commit()

        logger.info(
            "Delegated account created",
            account_id=account.id,
            email=account.email,
            permissions=account.permissions,
            expiry_date=expiry_date.isoformat() if expiry_date else None,
            created_by=created_by,
        )
        return account

    async def get_delegated_accounts(self) -> list[DelegatedAccountModel]:
        return await self.accounts.list_all()

    async def get_delegated_account(self, account_id: str) -> DelegatedAccountModel:
        account = await self.accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Delegated account not found")
        return account

    async def update_delegated_account(
        self, account_id: str, changes: GrantChanges
    ) -> DelegatedAccountModel:
        """Apply a partial update to a delegated account.

        Permissions are re-validated against the catalog. The stored status
        is then reconciled with the (possibly new) validity window.
        """
        account = await self.get_delegated_account(account_id)

        if "permissions" in changes.provided and changes.permissions is not None:
            await self.validate_permissions(changes.permissions)
            account.permissions = list(changes.permissions)
        if "start_date" in changes.provided:
            account.start_date = changes.start_date
        account.expiry_date = apply_expiry_change(account.expiry_date, changes)
        if "notes" in changes.provided:
            account.notes = changes.notes
        validate_window(account.start_date, account.expiry_date)

        await self.session.flush()
        await reconcile_status(account, self.accounts)
        await self.session.commit()
        logger.info("Delegated account updated", account_id=account_id, fields=sorted(changes.provided))
        return account

    async def revoke_delegated_account(
        self, account_id: str, revoked_by: str | None
    ) -> DelegatedAccountModel:
        account = await self.get_delegated_account(account_id)
        ensure_revocable(account.status)
        account.status = GrantStatus.REVOKED.value
        account.revoked_by = revoked_by
        account.revoked_at = datetime.now(timezone.utc)
        await self.session.commit()
        logger.info("Delegated account revoked", account_id=account_id, revoked_by=revoked_by)
        return account

    async def suspend_delegated_account(self, account_id: str) -> DelegatedAccountModel:
        account = await self.get_delegated_account(account_id)
        account.status = suspended_status(account.status)
        await self.session.commit()
        logger.info("Delegated account suspended", account_id=account_id)
        return account

    async def unsuspend_delegated_account(self, account_id: str) -> DelegatedAccountModel:
        account = await self.get_delegated_account(account_id)
        account.status = unsuspended_status(account)
        await self.session.commit()
        logger.info("Delegated account unsuspended", account_id=account_id, status=account.status)
        return account

    async def delete_delegated_account(self, account_id: str) -> None:
        account = await self.get_delegated_account(account_id)
        await self.accounts.delete(account)
        await self.session.commit()
        logger.info("Delegated account deleted", account_id=account_id)

    async def get_effective_status(self, account: DelegatedAccountModel) -> GrantStatus:
        """Reconcile and return the account's effective status."""
        status = await reconcile_status(account, self.accounts)
        await self.session.commit()
        return status

    async def check_delegated_account_access(
        self, email: str, required_permission: str
    ) -> bool:
        """Check whether the delegated account for ``email`` grants a permission.

        The account's status is reconciled first, so an account found past
        its expiry is flipped to ``expired`` and denied.

        Args:
            email: Email of the principal.
            required_permission: Permission string such as ``schools:read``.

        Returns:
            True if the account is effectively active and covers the permission.
        """
        account = await self.accounts.get_by_email(email)
        if account is None:
            return False

        if await self.get_effective_status(account) is not GrantStatus.ACTIVE:
            logger.debug(
                "Delegated account not active",
                email=email,
                status=account.status,
                permission=required_permission,
            )
            return False

        return grant_covers(account.permissions or [], required_permission)
