from contextlib import contextmanager
from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.exc import OperationalError, TimeoutError as SQLAlchemyTimeoutError
from sqlalchemy.pool import StaticPool
from flashdeck.core.config import settings
import logging

logger = logging.getLogger(__name__)


def normalize_database_url(db_url: str) -> str:
    """SQLAlchemy prefers postgresql:// over postgres://."""
    if db_url.startswith("postgres://"):
        return db_url.replace("postgres://", "postgresql://", 1)
    return db_url


def build_engine(db_url: str):
    """
    Create the process-wide engine for a database URL.

    PostgreSQL connections get a per-statement timeout so a stuck query fails
    instead of hanging the request. SQLite (local runs and tests) gets a busy
    timeout, and in-memory databases share a single connection.
    """
    db_url = normalize_database_url(db_url)
    timeout_seconds = max(1, settings.db_statement_timeout_ms // 1000)

    if db_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout_seconds}}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=False, **kwargs)

    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
        pool_timeout=timeout_seconds,
        connect_args={
            "connect_timeout": timeout_seconds,
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        },
    )


logger.info(f"Connecting to database: {normalize_database_url(settings.database_url)[:20]}...")  # Log partial URL for debugging

engine = build_engine(settings.database_url)


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


@contextmanager
def atomic(session: Session):
    """
    Run a multi-step write as one transaction.

    Commits when the block finishes, rolls back and re-raises on any error so
    no partial state is left behind.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def init_db():
    """Initialize database tables."""
    from flashdeck import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


TIMEOUT_MARKERS = (
    "statement timeout",
    "canceling statement due to",
    "database is locked",
    "timeout expired",
)


def is_timeout_error(exc: Exception) -> bool:
    """Whether a SQLAlchemy error means the datastore did not answer in time."""
    if isinstance(exc, SQLAlchemyTimeoutError):
        return True
    if isinstance(exc, OperationalError):
        message = str(exc.orig if exc.orig is not None else exc).lower()
        return any(marker in message for marker in TIMEOUT_MARKERS)
    return False
