"""Authenticated identity passed explicitly through guards and services."""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.inspector.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """Identity and role extracted from a validated access token."""

    user_id: UUID
    role: UserRole
    name: str
    email: str
    claims: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "Principal | None":
        """Build a principal from decoded claims. Returns None if claims are malformed."""
        try:
            user_id = UUID(str(claims["sub"]))
            role = UserRole(claims["role"])
        except (KeyError, ValueError):
            return None
        return cls(
            user_id=user_id,
            role=role,
            name=str(claims.get("name", "")),
            email=str(claims.get("email", "")),
            claims=claims,
        )

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles

    def is_owner(self, resource_owner_id: UUID | str | None) -> bool:
        """True if the resource belongs to this principal."""
        if resource_owner_id is None:
            return False
        return str(resource_owner_id) == str(self.user_id)

    def can_access(self, resource_owner_id: UUID | str | None) -> bool:
        """Ownership rule: the owner, or an Admin (who bypasses ownership)."""
        return self.is_admin() or self.is_owner(resource_owner_id)
