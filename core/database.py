"""
Engine and session factory for the booking desk store.

Entries, completed files, master lists, local charges, booking requests
and users all live in the one database named by ``DATABASE_URL``.
"""
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL is not set; add it to the environment or the .env file")


def _engine_options(url: str) -> dict:
    options = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Request handlers run in a threadpool
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """One session per request; services commit or roll back, this only closes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
