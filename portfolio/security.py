import logging
from functools import lru_cache

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from pydantic import ValidationError
from werkzeug.security import check_password_hash, generate_password_hash

from portfolio.config import Settings
from portfolio.schemas import SessionUser

logger = logging.getLogger(__name__)

TOKEN_SALT = "portfolio-auth"


def hash_password(raw: str) -> str:
    return generate_password_hash(raw)


def check_password(password_hash: str, raw: str) -> bool:
    return check_password_hash(password_hash, raw)


@lru_cache(maxsize=None)
def dummy_password_hash() -> str:
    """Hash checked for unknown usernames so a miss costs as much as a wrong password."""
    return generate_password_hash("not-a-real-password")


def _serializer(settings: Settings) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.secret_key, salt=TOKEN_SALT)


def issue_token(user, settings: Settings) -> str:
    """Sign the user's identity and admin flag into a cookie-safe token.

    The issue time is embedded by itsdangerous; ``read_token`` enforces
    ``settings.token_ttl_seconds`` against it.
    """
    payload = {"sub": user.id, "username": user.username, "is_admin": bool(user.is_admin)}
    return _serializer(settings).dumps(payload)


def read_token(token: str | None, settings: Settings) -> SessionUser | None:
    """Return the identity a token proves, or None if it proves nothing."""
    if not token:
        return None

    try:
        payload = _serializer(settings).loads(token, max_age=settings.token_ttl_seconds)
    except SignatureExpired:
        logger.info("Rejected expired auth token")
        return None
    except BadSignature:
        logger.warning("Rejected auth token with a bad signature")
        return None

    try:
        return SessionUser(id=payload["sub"], username=payload["username"], is_admin=payload["is_admin"])
    except (KeyError, TypeError, ValidationError):
        logger.warning("Rejected auth token with a malformed payload")
        return None
