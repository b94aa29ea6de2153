from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from hr_access.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite has no connection pool sizing
    **(
        {"connect_args": {"check_same_thread": False}}
        if settings.DATABASE_URL.startswith("sqlite")
        else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
    ),
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.
    One session backs every snapshot read and override write of a request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
