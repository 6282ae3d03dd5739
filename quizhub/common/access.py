"""
Role-based access policy.

Kept free of Flask request state so it can be checked against any identity
object: a Flask-Login user, an anonymous user, a test double, or ``None``.
"""
from typing import Any, Optional


class Role:
    ADMIN = "ADMIN"
    USER = "USER"

    ALL = (ADMIN, USER)


def has_role(identity: Optional[Any], required_role: str) -> bool:
    """
    Decide whether ``identity`` may call an operation that needs ``required_role``.

    Args:
        identity: The caller, or None when there is no session
        required_role: One of the values in ``Role``

    Returns:
        True only for an authenticated identity whose role matches exactly
    """
    if identity is None:
        return False
    if not getattr(identity, "is_authenticated", False):
        return False
    return getattr(identity, "role", None) == required_role
