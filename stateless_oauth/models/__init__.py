from stateless_oauth.models.application import Application
from stateless_oauth.models.revoked_token import RevokedToken
from stateless_oauth.models.user import User

__all__ = [
    "Application",
    "RevokedToken",
    "User",
]
