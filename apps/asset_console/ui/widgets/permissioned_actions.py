from __future__ import annotations

from dataclasses import dataclass, field

FULL_ACCESS_ROLES = frozenset({"superadmin", "admin"})


@dataclass(frozen=True)
class Capability:
    """Read-only view of the signed-in user's role and ``scope:action`` permissions."""

    role: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_user(cls, role: str | None, permissions: list[str] | set[str] | None) -> "Capability":
        return cls(role=role, permissions=frozenset(permissions or ()))

    @property
    def has_full_access(self) -> bool:
        return (self.role or "").strip().lower() in FULL_ACCESS_ROLES

    def can(self, permission: str) -> bool:
        return self.has_full_access or permission in self.permissions

    def can_all(self, scope: str, *actions: str) -> bool:
        return all(self.can(f"{scope}:{action}") for action in actions)


ANONYMOUS = Capability()


@dataclass(frozen=True)
class PermissionGate:
    key: str
    allowed: bool
    reason: str | None = None


def gate_permission(capability: Capability, key: str | None, *, deny_message: str) -> PermissionGate:
    if key is None or capability.can(key):
        return PermissionGate(key=key or "", allowed=True)
    return PermissionGate(key=key, allowed=False, reason=deny_message)
