"""Access decisions for operatives, wanted records and user accounts.

Every function here is pure: it looks only at roles and ids and returns a
bool. ``ensure`` converts a denial into ``Forbidden`` at the call site.
"""
from .errors import Forbidden
from .models.enums import Role


def _checked(role: Role) -> Role:
    if not isinstance(role, Role):
        raise TypeError(f"expected Role, got {role!r}")
    return role


def is_admin(role: Role) -> bool:
    return _checked(role) is Role.ADMIN


def can_view_operatives(caller_role: Role, target_role: Role) -> bool:
    """Admins see every faction; everyone else only their own."""

    return is_admin(caller_role) or _checked(caller_role) is _checked(target_role)


def can_mutate_operative(caller_role: Role, record_role: Role) -> bool:
    return is_admin(caller_role) or _checked(caller_role) is _checked(record_role)


def can_mutate_wanted(caller_role: Role) -> bool:
    return is_admin(caller_role)


def can_mutate_user(caller_role: Role) -> bool:
    return is_admin(caller_role)


def can_delete_user(caller_role: Role, caller_id: int, target_id: int) -> bool:
    """Admins may delete accounts, but never their own."""

    return can_mutate_user(caller_role) and caller_id != target_id


def ensure(allowed: bool, detail: str = "Forbidden") -> None:
    if not allowed:
        raise Forbidden(detail)
