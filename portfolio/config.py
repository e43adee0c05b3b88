import os
import logging
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SECRET = "dev-secret"


def _flag(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    env: str = "dev"
    storage_backend: str = "memory"
    database_url: str | None = None
    db_connect_retries: int = 5
    db_connect_backoff: float = 0.5

    secret_key: str = DEFAULT_SECRET
    token_ttl_seconds: int = 24 * 60 * 60
    auth_cookie_name: str = "auth_token"
    cookie_secure: bool = False
    cookie_samesite: str = "lax"

    admin_username: str = "Abid"
    admin_password: str | None = None

    email_host: str | None = None
    email_port: int = 587
    email_user: str | None = None
    email_password: str | None = None
    owner_email: str | None = None
    webhook_url: str | None = None

    theme_path: Path = Path("theme.json")
    static_dir: Path = PACKAGE_DIR / "static"
    cors_origins: list[str] = ["http://localhost:8000", "http://localhost:5173"]
    log_level: str = "INFO"

    @property
    def is_prod(self) -> bool:
        return self.env == "prod"

    @property
    def email_configured(self) -> bool:
        return bool(self.email_host and self.email_user and self.email_password and self.owner_email)


def load_settings() -> Settings:
    """Build settings from the environment (and a local .env file, if any)."""
    load_dotenv()

    env = os.getenv("ENV", "dev")
    database_url = os.getenv("DATABASE_URL") or None
    backend = os.getenv("STORAGE_BACKEND") or ("database" if database_url else "memory")

    settings = Settings(
        env=env,
        storage_backend=backend,
        database_url=database_url,
        db_connect_retries=int(os.getenv("DB_CONNECT_RETRIES", "5")),
        db_connect_backoff=float(os.getenv("DB_CONNECT_BACKOFF", "0.5")),
        secret_key=os.getenv("SECRET_KEY", DEFAULT_SECRET),
        token_ttl_seconds=int(os.getenv("TOKEN_TTL_SECONDS", str(24 * 60 * 60))),
        auth_cookie_name=os.getenv("AUTH_COOKIE_NAME", "auth_token"),
        cookie_secure=_flag(os.getenv("COOKIE_SECURE"), env == "prod"),
        cookie_samesite=os.getenv("COOKIE_SAMESITE", "lax"),
        admin_username=os.getenv("ADMIN_USERNAME", "Abid"),
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        email_host=os.getenv("EMAIL_HOST") or None,
        email_port=int(os.getenv("EMAIL_PORT", "587")),
        email_user=os.getenv("EMAIL_USER") or None,
        email_password=os.getenv("EMAIL_PASSWORD") or None,
        owner_email=os.getenv("YOUR_EMAIL") or None,
        webhook_url=os.getenv("WEBHOOK_URL") or None,
        theme_path=Path(os.getenv("THEME_PATH", "theme.json")),
        static_dir=Path(os.getenv("STATIC_DIR", str(PACKAGE_DIR / "static"))),
        cors_origins=[
            o.strip()
            for o in os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost:5173").split(",")
            if o.strip()
        ],
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    if settings.is_prod and settings.secret_key == DEFAULT_SECRET:
        logger.warning("SECRET_KEY is not set; auth tokens are signed with the development secret")

    return settings


@lru_cache
def get_settings() -> Settings:
    return load_settings()
