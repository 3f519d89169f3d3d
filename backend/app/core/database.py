from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from app.core.config import settings

_engine_kwargs = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # TestClient and local scripts may access SQLite connections across threads.
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    # Drop connections the server closed while idle (managed Postgres does this).
    _engine_kwargs["pool_pre_ping"] = True

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ping_database(db: Session) -> None:
    """Raise if the database cannot answer a trivial query."""
    db.execute(text("SELECT 1"))
