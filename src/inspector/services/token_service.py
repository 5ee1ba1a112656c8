"""Token issuance, rotation and revocation.

The database is the source of truth for refresh tokens. Redis, when present,
only caches "this hash is revoked" so reused tokens are rejected without a
DB round trip.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.inspector.core.cache import (
    blacklist_token,
    blacklist_tokens_with_ttls,
    is_token_blacklisted,
)
from src.inspector.core.config import get_settings
from src.inspector.core.logging import get_logger
from src.inspector.core.security import (
    create_access_token,
    generate_refresh_token,
    hash_token,
)
from src.inspector.models import RefreshToken, RevocationReason, User
from src.inspector.models.base import utc_now
from src.inspector.repositories import RefreshTokenRepository, UserRepository
from src.inspector.services.results import FailureKind, ServiceResult

logger = get_logger(__name__)

INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"

# (token_hash, seconds until natural expiry)
RevokedTokens = list[tuple[str, int]]


@dataclass(frozen=True)
class TokenPair:
    """A freshly minted access/refresh pair. Expiries are naive UTC."""

    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


def _remaining_seconds(expires_at: datetime) -> int:
    return int((expires_at - utc_now()).total_seconds())


class TokenService:
    """Token issuer and refresh-token validator/rotator."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.session = session

    def issue_token_pair(
        self,
        user: User,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> TokenPair:
        """Mint an access token and a refresh token for the user.

        Adds one RefreshToken row holding only the hash of the secret. Does
        not revoke anything and does not commit; the caller owns the transaction.
        """
        settings = get_settings()
        access_token, access_expires_at = create_access_token(
            subject=user.id,
            name=user.display_name,
            email=user.email,
            role=user.role,
            full_name=user.full_name,
        )

        refresh_token = generate_refresh_token()
        refresh_expires_at = utc_now() + timedelta(days=settings.refresh_token_expire_days)
        self.token_repo.add(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_token(refresh_token),
                expires_at=refresh_expires_at,
                ip_address=ip_address,
                user_agent=user_agent[:512] if user_agent else None,
            )
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=access_expires_at,
            refresh_expires_at=refresh_expires_at,
        )

    async def refresh(
        self,
        presented_token: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ServiceResult[TokenPair]:
        """Redeem a refresh token for a new pair (rotation).

        The presented token is revoked with a conditional update in the same
        transaction that stores its replacement. A token can therefore be
        redeemed at most once, even by concurrent requests.

        Every failure returns the same message; the caller never learns whether
        the token was unknown, revoked or expired.
        """
        invalid: ServiceResult[TokenPair] = ServiceResult.fail(
            FailureKind.AUTHENTICATION, INVALID_REFRESH_TOKEN
        )
        if not presented_token:
            return invalid

        token_hash = hash_token(presented_token)
        if await self._is_cached_revoked(token_hash):
            logger.warning("Revoked refresh token presented (cache)")
            return invalid

        try:
            db_token = await self.token_repo.get_by_hash(token_hash)
            if db_token is None:
                logger.warning("Unknown refresh token presented", ip_address=ip_address)
                return invalid

            now = utc_now()
            if db_token.revoked:
                # Reuse of a rotated token is a theft signal worth noticing
                logger.warning(
                    "Revoked refresh token presented",
                    user_id=str(db_token.user_id),
                    revoked_reason=db_token.revoked_reason,
                    ip_address=ip_address,
                )
                return invalid
            if not db_token.is_active(now):
                logger.info("Expired refresh token presented", user_id=str(db_token.user_id))
                return invalid

            user = await self.user_repo.get_by_id(db_token.user_id)
            if user is None or not user.is_active or user.is_locked_out(now):
                logger.warning(
                    "Refresh rejected for unavailable account", user_id=str(db_token.user_id)
                )
                return invalid

            if not await self.token_repo.revoke_if_active(token_hash, RevocationReason.REFRESH):
                await self.session.rollback()
                logger.warning(
                    "Refresh token already redeemed by a concurrent request",
                    user_id=str(user.id),
                )
                return invalid

            pair = self.issue_token_pair(user, ip_address, user_agent)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.cache_revoked([(token_hash, _remaining_seconds(db_token.expires_at))])
        logger.info("Refresh token rotated", user_id=str(user.id))
        return ServiceResult.ok("Token refreshed successfully", pair)

    async def revoke_refresh_token(
        self,
        presented_token: str,
        reason: RevocationReason = RevocationReason.LOGOUT,
    ) -> bool:
        """Revoke a single refresh token and commit.

        Returns True if this call revoked it; False if it was unknown or already
        revoked, which callers treat as success (idempotent logout).
        """
        token_hash = hash_token(presented_token)
        try:
            db_token = await self.token_repo.get_by_hash(token_hash)
            if db_token is None:
                return False
            revoked = await self.token_repo.revoke_if_active(token_hash, reason)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if revoked:
            await self.cache_revoked([(token_hash, _remaining_seconds(db_token.expires_at))])
            logger.info("Refresh token revoked", user_id=str(db_token.user_id), reason=reason.value)
        return revoked

    async def revoke_all_for_user(self, user_id: UUID, reason: RevocationReason) -> RevokedTokens:
        """Revoke every live refresh token of a user, without committing.

        Returns the revoked hashes with their remaining lifetimes; pass them to
        cache_revoked() after the caller commits.
        """
        active = await self.token_repo.get_active_tokens_for_user(user_id)
        count = await self.token_repo.revoke_all_for_user(user_id, reason)
        logger.info(
            "Revoked all refresh tokens for user",
            user_id=str(user_id),
            reason=reason.value,
            count=count,
        )
        return [(token.token_hash, _remaining_seconds(token.expires_at)) for token in active]

    async def cleanup_expired(self, retention_days: int | None = None) -> int:
        """Delete refresh tokens that expired or were revoked long ago."""
        if retention_days is None:
            retention_days = get_settings().cleanup_retention_days
        try:
            deleted = await self.token_repo.cleanup_expired(retention_days)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Expired refresh tokens cleaned up", deleted=deleted, retention_days=retention_days)
        return deleted

    async def cache_revoked(self, tokens: RevokedTokens) -> None:
        """Best-effort write to the revoked-token cache. Runs after commit."""
        if not tokens:
            return
        try:
            if len(tokens) == 1:
                await blacklist_token(*tokens[0])
            else:
                await blacklist_tokens_with_ttls(tokens)
        except Exception as e:
            # The database already holds the revocation
            logger.warning("Failed to cache revoked refresh tokens", error=str(e), count=len(tokens))

    async def _is_cached_revoked(self, token_hash: str) -> bool:
        try:
            return await is_token_blacklisted(token_hash) is True
        except Exception as e:
            logger.warning("Revoked-token cache lookup failed", error=str(e))
            return False
