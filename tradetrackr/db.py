# db.py
import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()


# Local SQLite file unless DATABASE_URL says otherwise
DEFAULT_DATABASE_URL = "sqlite:///./tradetrackr.db"
DATABASE_URL = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def _make_engine(url):
    return create_engine(
        url,
        pool_pre_ping=True,
        future=True
    )


# Create SQLAlchemy engine
engine = _make_engine(DATABASE_URL)

# Create a configured "Session" class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
    expire_on_commit=False  # keep attributes readable after the session closes
)

# Base class for declarative models
Base = declarative_base()


def make_session_factory(url):
    """A fresh engine and Session class for one app."""
    app_engine = _make_engine(url)
    factory = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=app_engine,
        future=True,
        expire_on_commit=False
    )
    return app_engine, factory


def init_db(bind=None):
    """Create any missing tables."""
    from . import models  # noqa: F401  registers the tables on Base.metadata
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Dependency-style session generator"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection(bind=None):
    """Optional: Check DB connection for diagnostics"""
    try:
        with (bind or engine).connect():
            print("✅ Database connection successful.")
            return True
    except SQLAlchemyError as e:
        print("❌ Database connection failed:", e)
        return False
