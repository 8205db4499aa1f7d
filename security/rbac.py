from functools import wraps
from flask import g

from services.errors import ForbiddenError, Unauthenticated


def has_role(user, *role_names: str) -> bool:
    return user is not None and user.role in role_names

def require_roles(*role_names: str):
    """
    Usage: @require_roles("admin")
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "user", None)
            if user is None:
                raise Unauthenticated("Authentication required")

            if not has_role(user, *role_names):
                raise ForbiddenError("Forbidden")

            return fn(*args, **kwargs)
        return wrapper
    return decorator
