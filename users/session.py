# users/session.py
from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    user_id: str
    role: str


def resolve_session(request):
    """
    Return the acting (user_id, role) for an authenticated request, or None.

    Which credentials produced `request.user` is decided by the configured
    authentication class (JWT, or the fixed OWNER identity in skip-auth mode);
    this function only reads the result.
    """
    user = getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    role = getattr(user, "role", None)
    user_id = getattr(user, "user_id", None)
    if not role or not user_id:
        return None
    return Session(user_id=user_id, role=role)
