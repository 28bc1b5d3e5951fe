from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from filemyrti_api.core.config import get_settings

settings = get_settings()

SQLALCHEMY_DATABASE_URL = settings.database_url

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}  # Required for SQLite

# Create database engine
engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True, echo=False, connect_args=connect_args)

# Create declarative base
Base = declarative_base()


# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency for database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables. Models must be imported so they register on the metadata."""
    import filemyrti_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
