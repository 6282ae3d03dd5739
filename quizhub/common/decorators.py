from functools import wraps
from flask import request
from flask_login import current_user

from quizhub.common.access import Role, has_role
from quizhub.common.errors import Unauthorized
from quizhub.security import SecurityLogger


def role_required(role: str):
    """Decorator to require an authenticated caller holding ``role`` for a route."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not has_role(current_user, role):
                user_id = current_user.id if current_user.is_authenticated else None
                SecurityLogger.log_unauthorized_access(request.path, user_id)
                return Unauthorized().to_response()
            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = role_required(Role.ADMIN)
user_required = role_required(Role.USER)
