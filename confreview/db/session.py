from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from confreview.core.config import settings


def build_engine(url: str | None = None, **kwargs) -> Engine:
    url = url or settings.database_url
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, echo=settings.sql_echo, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)
