"""Who may do what to a task.

Route-level role gates live here next to the ownership predicates the
service evaluates, so the rules can be tested without going through HTTP.
"""

from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity

from codetasks.errors import ForbiddenError, UnauthorizedError
from codetasks.models.task_model import CurrentUser, Role

CREATE_TASK_ROLES = (Role.STAFF,)
UPDATE_TASK_ROLES = (Role.STAFF,)
AUDIT_TASK_ROLES = (Role.AUDITOR,)


def has_role(user, roles):
    return user.role in roles


def can_delete_task(user, task):
    if user.role == Role.AUDITOR:
        return True
    return user.role == Role.STAFF and user.id == task.author.id


def is_comment_author(user, comment):
    return user.id == comment.author.id


def current_user():
    """Build the caller from the verified JWT: ``sub`` plus username/role claims."""
    identity = get_jwt_identity()
    if identity is None:
        raise UnauthorizedError()
    claims = get_jwt()
    try:
        role = Role(claims.get("role", Role.USER.value))
    except ValueError:
        raise UnauthorizedError() from None
    return CurrentUser(id=str(identity), username=claims.get("username", ""), role=role)


def roles_required(*roles):
    """Reject callers whose role is not in ``roles``. Place under ``@jwt_required()``."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_user()
            if not has_role(user, roles):
                raise ForbiddenError()
            return fn(*args, **kwargs)

        return wrapper

    return decorator
