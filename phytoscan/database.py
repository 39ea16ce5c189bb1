"""SQLAlchemy engine and session factory for the SQL storage backend."""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from phytoscan.config import settings


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared across FastAPI worker threads
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url, connect_args=_connect_args(settings.database_url)
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
