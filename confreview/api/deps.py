from __future__ import annotations

import uuid
from typing import Iterator

from fastapi import Header, HTTPException, status
from sqlalchemy.orm import Session

from confreview.db.session import SessionLocal


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> uuid.UUID:
    """
    Аутентификация вне сервиса: шлюз кладёт id пользователя в X-User-Id.
    """
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header is required")
    try:
        return uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id must be a UUID")
