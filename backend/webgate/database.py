import logging
from sqlalchemy import create_engine, URL
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from webgate.configuration import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _database_url():
    # Using URL.create() instead of f-string to prevent password from appearing in stack traces
    if settings.DATABASE_URL:
        return make_url(settings.DATABASE_URL)
    return URL.create(
        "mysql+pymysql",
        username=settings.DB_USER,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
        query={"charset": "utf8mb4"},
    )


def build_engine(url):
    """
    Create the connection pool for a database URL.

    SQLite gets a single shared connection when in-memory, since every new
    connection would otherwise see an empty database.
    """
    url = make_url(url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,  # Connections in pool
        max_overflow=settings.DB_MAX_OVERFLOW,  # Extra connections when pool full
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,  # Recycle connections every hour
        echo=False,  # Set True for SQL logging
    )


DATABASE_URL = _database_url()
engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for endpoints
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create every table that does not exist yet."""
    # Import all models to register them with Base
    from webgate.models import accounts, registration_request, page_content  # noqa: F401
    Base.metadata.create_all(bind=engine)


def reset_database():
    """
    Drop and recreate every table, leaving them empty.
    Irreversible; callers must obtain explicit confirmation first.
    """
    from webgate.models import accounts, registration_request, page_content  # noqa: F401
    logger.warning("[Database] Dropping all tables")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.warning("[Database] All tables recreated empty")
