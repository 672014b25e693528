from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from typing import Generator

from .config import DATABASE_URL

# PostgreSQL when deployed; tests swap in an in-memory SQLite engine
engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator:
    """One session per API request, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
