"""Authentication flows: register, login, change/reset password, logout.

Every expected failure comes back as a failed ServiceResult. Messages on the
authentication paths are deliberately generic so callers cannot tell an
unknown email from a wrong password.
"""

import asyncio
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.inspector.core.config import get_settings
from src.inspector.core.logging import get_logger
from src.inspector.core.notifications import (
    send_password_changed_email,
    send_password_reset_email,
)
from src.inspector.core.security import (
    DUMMY_PASSWORD_HASH,
    Principal,
    generate_reset_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.inspector.models import PasswordResetToken, RevocationReason, User, UserRole
from src.inspector.models.base import utc_now
from src.inspector.repositories import PasswordResetTokenRepository, UserRepository
from src.inspector.repositories.user import normalize_email, normalize_username
from src.inspector.services.results import FailureKind, ServiceResult
from src.inspector.services.token_service import TokenPair, TokenService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_DEACTIVATED = "Account is deactivated"
ACCOUNT_LOCKED = "Account is locked"
FORGOT_PASSWORD_MESSAGE = "If the email exists, password reset instructions have been sent"
INVALID_RESET_TOKEN = "Invalid reset token"


@dataclass(frozen=True)
class AuthSession:
    """Result payload of a successful register or login."""

    user: User
    tokens: TokenPair


class AuthService:
    """Auth orchestrator.

    Identity is always passed in explicitly (a Principal for authenticated
    calls); nothing here reads request-scoped state.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        reset_repo: PasswordResetTokenRepository,
        token_service: TokenService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.reset_repo = reset_repo
        self.token_service = token_service
        self.session = session

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.ENGINEER,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ServiceResult[AuthSession]:
        """Create an account and sign it in.

        Accounts are confirmed on creation; there is no verification gate.
        """
        if await self.user_repo.exists_by_email(email):
            return ServiceResult.fail(FailureKind.CONFLICT, "Email already exists")
        if await self.user_repo.exists_by_username(username):
            return ServiceResult.fail(FailureKind.CONFLICT, "Username already exists")

        user = User(
            email=normalize_email(email),
            username=username.strip(),
            normalized_username=normalize_username(username),
            hashed_password=hash_password(password),
            full_name=full_name,
            role=role.value,
            email_confirmed=True,
        )
        try:
            self.user_repo.add(user)
            # Flush so a concurrent duplicate surfaces before the token row is added
            await self.session.flush()
            tokens = self.token_service.issue_token_pair(user, ip_address, user_agent)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Registration lost a uniqueness race", username=username)
            return ServiceResult.fail(FailureKind.CONFLICT, "Email or username already exists")
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return ServiceResult.ok("User registered successfully", AuthSession(user, tokens))

    async def login(
        self,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ServiceResult[AuthSession]:
        """Verify credentials and issue a token pair.

        Account state (deactivated, locked) is only disclosed to a caller who
        supplied the correct password.
        """
        invalid: ServiceResult[AuthSession] = ServiceResult.fail(
            FailureKind.AUTHENTICATION, INVALID_CREDENTIALS
        )
        user = await self.user_repo.get_by_email(email)

        # Always verify, even for unknown emails, so timing does not leak existence
        password_valid = verify_password(
            password, user.hashed_password if user else DUMMY_PASSWORD_HASH
        )

        if user is None:
            logger.warning("Login failed", reason="unknown_email", ip_address=ip_address)
            return invalid

        if not password_valid:
            await self._record_failed_login(user, ip_address)
            return invalid

        if not user.is_active:
            logger.warning("Login refused for deactivated account", user_id=str(user.id))
            return ServiceResult.fail(FailureKind.AUTHENTICATION, ACCOUNT_DEACTIVATED)

        now = utc_now()
        if user.is_locked_out(now):
            logger.warning("Login refused for locked account", user_id=str(user.id))
            return ServiceResult.fail(FailureKind.AUTHENTICATION, ACCOUNT_LOCKED)

        try:
            if user.is_locked:
                # Lock period has elapsed
                user.is_locked = False
                user.lockout_end = None
            user.login_attempts = 0
            user.last_login_at = now
            user.last_login_ip = ip_address
            user.updated_at = now
            self.session.add(user)
            tokens = self.token_service.issue_token_pair(user, ip_address, user_agent)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User logged in", user_id=str(user.id))
        return ServiceResult.ok("Login successful", AuthSession(user, tokens))

    async def change_password(
        self,
        principal: Principal,
        current_password: str,
        new_password: str,
    ) -> ServiceResult[None]:
        """Change the caller's password and sign out every session.

        All refresh tokens are revoked. The access token the caller holds stays
        valid until it expires.
        """
        user = await self.user_repo.get_by_id(principal.user_id)
        if user is None or not user.is_active:
            return ServiceResult.fail(FailureKind.NOT_FOUND, "User not found")

        if not verify_password(current_password, user.hashed_password):
            logger.warning("Password change refused: wrong current password", user_id=str(user.id))
            return ServiceResult.fail(FailureKind.VALIDATION, "Current password is incorrect")
        if verify_password(new_password, user.hashed_password):
            return ServiceResult.fail(
                FailureKind.VALIDATION, "New password must be different from the current password"
            )

        try:
            user.hashed_password = hash_password(new_password)
            user.updated_at = utc_now()
            self.session.add(user)
            revoked = await self.token_service.revoke_all_for_user(
                user.id, RevocationReason.PASSWORD_CHANGE
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.token_service.cache_revoked(revoked)
        await asyncio.to_thread(send_password_changed_email, user.email, user.full_name)
        logger.info("Password changed", user_id=str(user.id))
        return ServiceResult.ok("Password changed successfully")

    async def logout(self, refresh_token: str) -> ServiceResult[None]:
        """Revoke the presented refresh token. Unknown or already revoked tokens are fine."""
        if not refresh_token or not refresh_token.strip():
            return ServiceResult.fail(FailureKind.VALIDATION, "Refresh token is required")

        await self.token_service.revoke_refresh_token(refresh_token, RevocationReason.LOGOUT)
        return ServiceResult.ok("Logged out successfully")

    async def forgot_password(self, email: str) -> ServiceResult[None]:
        """Start a password reset. The response never reveals whether the account exists."""
        user = await self.user_repo.get_by_email(email)
        if user is None or not user.is_active:
            logger.info("Password reset requested for unknown or inactive account")
            return ServiceResult.ok(FORGOT_PASSWORD_MESSAGE)

        settings = get_settings()
        token = generate_reset_token()
        try:
            await self.reset_repo.invalidate_user_tokens(user.id)
            self.reset_repo.add(
                PasswordResetToken(
                    user_id=user.id,
                    token_hash=hash_token(token),
                    expires_at=utc_now() + timedelta(minutes=settings.password_reset_expire_minutes),
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await asyncio.to_thread(send_password_reset_email, user.email, token, user.full_name)
        logger.info("Password reset token issued", user_id=str(user.id))
        return ServiceResult.ok(FORGOT_PASSWORD_MESSAGE)

    async def reset_password(
        self,
        email: str,
        token: str,
        new_password: str,
    ) -> ServiceResult[None]:
        """Consume a reset token, set the new password and sign out every session."""
        invalid: ServiceResult[None] = ServiceResult.fail(FailureKind.VALIDATION, INVALID_RESET_TOKEN)

        user = await self.user_repo.get_by_email(email)
        if user is None or not user.is_active:
            return invalid

        db_token = await self.reset_repo.get_valid_by_hash(hash_token(token))
        if db_token is None or db_token.user_id != user.id:
            logger.warning("Invalid password reset token presented", user_id=str(user.id))
            return invalid

        try:
            if not await self.reset_repo.mark_used(db_token):
                await self.session.rollback()
                return invalid
            user.hashed_password = hash_password(new_password)
            user.login_attempts = 0
            user.updated_at = utc_now()
            self.session.add(user)
            revoked = await self.token_service.revoke_all_for_user(
                user.id, RevocationReason.PASSWORD_CHANGE
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.token_service.cache_revoked(revoked)
        logger.info("Password reset completed", user_id=str(user.id))
        return ServiceResult.ok("Password reset successfully")

    async def _record_failed_login(self, user: User, ip_address: str | None) -> None:
        """Count a failed attempt and lock the account once the limit is reached."""
        settings = get_settings()
        now = utc_now()
        try:
            if user.is_locked and not user.is_locked_out(now):
                # An expired lock starts a fresh attempt window
                user.is_locked = False
                user.lockout_end = None
                user.login_attempts = 0
            user.login_attempts += 1
            if user.login_attempts >= settings.max_login_attempts and not user.is_locked:
                user.is_locked = True
                user.lockout_end = now + timedelta(minutes=settings.lockout_minutes)
                logger.warning(
                    "Account locked after repeated failed logins",
                    user_id=str(user.id),
                    attempts=user.login_attempts,
                )
            self.session.add(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.warning(
            "Login failed",
            reason="bad_password",
            user_id=str(user.id),
            attempts=user.login_attempts,
            ip_address=ip_address,
        )
