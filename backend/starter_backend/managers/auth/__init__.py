from .security import create_access_token, decode_access_token, get_password_hash, verify_password
from .utils import get_current_user, get_token_from_header

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_password_hash",
    "get_token_from_header",
    "verify_password",
]
