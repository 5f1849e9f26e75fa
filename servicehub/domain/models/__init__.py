"""Domain models for the ServiceHub identity service."""

from .account import Account, Role, SocialProvider
from .login_event import LoginEvent

__all__ = [
    "Account",
    "LoginEvent",
    "Role",
    "SocialProvider",
]
