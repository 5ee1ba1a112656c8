from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.inspector.core.config import get_settings
from src.inspector.core.logging import get_logger
from src.inspector.core.security import Principal
from src.inspector.models import RevocationReason, User
from src.inspector.models.base import utc_now
from src.inspector.repositories import UserRepository
from src.inspector.services.results import FailureKind, ServiceResult
from src.inspector.services.token_service import TokenService

logger = get_logger(__name__)

USER_NOT_FOUND = "User not found"


class UserService:
    """User administration: lookup, listing, activation and locking."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_service = token_service
        self.session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self.user_repo.get_by_id(user_id)

    async def list_users(
        self,
        cursor: str | None,
        limit: int,
        role: str | None = None,
        search: str | None = None,
    ) -> tuple[list[User], str | None, bool]:
        return await self.user_repo.list_users(cursor, limit, role=role, search=search)

    async def deactivate(self, principal: Principal, user_id: UUID) -> ServiceResult[User]:
        """Deactivate an account and revoke every refresh token it holds."""
        if principal.user_id == user_id:
            return ServiceResult.fail(FailureKind.VALIDATION, "You cannot deactivate your own account")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail(FailureKind.NOT_FOUND, USER_NOT_FOUND)

        try:
            user.is_active = False
            user.updated_at = utc_now()
            self.session.add(user)
            revoked = await self.token_service.revoke_all_for_user(
                user.id, RevocationReason.DEACTIVATION
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.token_service.cache_revoked(revoked)
        logger.info("User deactivated", user_id=str(user.id), by=str(principal.user_id))
        return ServiceResult.ok("User deactivated successfully", user)

    async def activate(self, principal: Principal, user_id: UUID) -> ServiceResult[User]:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail(FailureKind.NOT_FOUND, USER_NOT_FOUND)

        try:
            user.is_active = True
            user.updated_at = utc_now()
            self.session.add(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User activated", user_id=str(user.id), by=str(principal.user_id))
        return ServiceResult.ok("User activated successfully", user)

    async def lock(
        self,
        principal: Principal,
        user_id: UUID,
        minutes: int | None = None,
    ) -> ServiceResult[User]:
        """Lock an account for a period and sign out all of its sessions.

        Without an explicit duration the lock lasts admin_lock_hours.
        """
        if principal.user_id == user_id:
            return ServiceResult.fail(FailureKind.VALIDATION, "You cannot lock your own account")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail(FailureKind.NOT_FOUND, USER_NOT_FOUND)

        duration = (
            timedelta(minutes=minutes)
            if minutes is not None
            else timedelta(hours=get_settings().admin_lock_hours)
        )
        try:
            now = utc_now()
            user.is_locked = True
            user.lockout_end = now + duration
            user.updated_at = now
            self.session.add(user)
            revoked = await self.token_service.revoke_all_for_user(user.id, RevocationReason.LOCK)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.token_service.cache_revoked(revoked)
        logger.info(
            "User locked",
            user_id=str(user.id),
            by=str(principal.user_id),
            lockout_end=user.lockout_end.isoformat(),
        )
        return ServiceResult.ok("User locked successfully", user)

    async def unlock(self, principal: Principal, user_id: UUID) -> ServiceResult[User]:
        """Clear any lock and the failed-login counter."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail(FailureKind.NOT_FOUND, USER_NOT_FOUND)

        try:
            user.is_locked = False
            user.lockout_end = None
            user.login_attempts = 0
            user.updated_at = utc_now()
            self.session.add(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User unlocked", user_id=str(user.id), by=str(principal.user_id))
        return ServiceResult.ok("User unlocked successfully", user)
