"""Auth module exports."""
from wonderlake.auth.jwt import (
    verify_password,
    hash_password,
    create_access_token,
    create_refresh_token,
    verify_token,
    get_current_user,
    get_current_active_admin,
)

__all__ = [
    "verify_password",
    "hash_password",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "get_current_user",
    "get_current_active_admin",
]
