from functools import wraps

from flask_login import current_user, login_required

from .errors import Forbidden


def admin_required(view):
    """login_required plus the admin role."""

    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_user.is_admin:
            raise Forbidden("Administrator role required")
        return view(*args, **kwargs)

    return wrapper


def require_owner_or_admin(user_id: int):
    if current_user.id != user_id and not current_user.is_admin:
        raise Forbidden(f"User {current_user.id} cannot act on behalf of user {user_id}")


def require_owner(user_id: int):
    if current_user.id != user_id:
        raise Forbidden(f"User {current_user.id} cannot act on behalf of user {user_id}")
