"""Decorators for the auth blueprint."""

from functools import wraps

from firebase_admin import firestore
from flask import g

from viralviews.constants import USERS_COLLECTION
from viralviews.errors import AuthenticationError, PermissionDeniedError


def is_admin(auth_ctx):
    """Check the admin token claim, then the user's document."""
    if auth_ctx.get("admin"):
        return True
    db = firestore.client()
    user_doc = db.collection(USERS_COLLECTION).document(auth_ctx["uid"]).get()
    return bool(user_doc.exists and (user_doc.to_dict() or {}).get("isAdmin"))


def login_required(f=None, admin_required=False):
    """Reject the request with 401 unless it carries a verified identity.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(admin_required=True)
    def admin_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            if not g.get("auth"):
                raise AuthenticationError()
            if admin_required and not is_admin(g.auth):
                raise PermissionDeniedError("You are not authorized to do this.")
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
