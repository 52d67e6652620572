from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from typing import Generator
from src.linkbio.core.config import settings
from src.linkbio.db.base import Base

# Register every table on Base.metadata before create_all
from src.linkbio.models import link, profile, user, user_session  # noqa: F401


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # one shared connection so in-memory databases survive across sessions
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.create_all(bind=engine)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
