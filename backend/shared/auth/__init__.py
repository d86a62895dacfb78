"""Sign-in state shared by the league app: mocked logins and the stored user record."""

from shared.auth.models import AuthProvider, AuthUser
from shared.auth.service import AuthError, AuthService
from shared.auth.settings import AuthSettings

__all__ = [
    "AuthError",
    "AuthProvider",
    "AuthService",
    "AuthSettings",
    "AuthUser",
]
