from functools import wraps

from flask_jwt_extended import current_user, verify_jwt_in_request

from outtie.errors import Forbidden


def auth_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        return fn(*args, **kwargs)
    return wrapper


def verification_required(fn):
    """Authentication first, then an approved verification status."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if current_user.verification_status != "approved":
            raise Forbidden(
                "Student verification required",
                reason="unverified",
                verification_status=current_user.verification_status,
            )
        return fn(*args, **kwargs)
    return wrapper
