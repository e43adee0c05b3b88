import time
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url: str):
    """Create an engine for the given URL.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    # Serverless Postgres drops idle connections; check them before use
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def connect_with_retry(engine, retries: int = 5, backoff: float = 0.5, sleep=time.sleep):
    """Run ``SELECT 1`` until the database answers.

    Waits ``backoff * 2**attempt`` seconds between attempts and re-raises the
    last error once ``retries`` attempts have failed. Only used at startup.
    """
    attempts = max(retries, 1)
    for attempt in range(attempts):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection successful (attempt %d)", attempt + 1)
            return
        except OperationalError as e:
            if attempt == attempts - 1:
                logger.error("Database connection failed after %d attempts: %s", attempts, e)
                raise
            delay = backoff * (2 ** attempt)
            logger.warning("Database not ready (attempt %d/%d), retrying in %.1fs", attempt + 1, attempts, delay)
            sleep(delay)


def init_db(engine):
    # import models so tables are known
    from portfolio.models import user, message, blog, project, skill  # noqa: F401

    Base.metadata.create_all(bind=engine)
