from __future__ import annotations

from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from confreview.core.config import settings
from confreview.core.errors import Conflict
from confreview.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def atomic(db: Session, operation: Callable[[], T], *, action: str, retries: int | None = None) -> T:
    """
    Выполняет operation как одну транзакцию (read-modify-write).

    Проигранная гонка (version_id_col -> StaleDataError, уникальный индекс ->
    IntegrityError) откатывается, и операция целиком перечитывается и
    повторяется. После исчерпания попыток наружу уходит Conflict.
    Доменные ошибки пробрасываются без повторов.
    """
    retries = settings.conflict_retries if retries is None else retries
    attempt = 0
    while True:
        try:
            result = operation()
            db.flush()
            db.commit()
            return result
        except (StaleDataError, IntegrityError) as exc:
            db.rollback()
            if attempt >= retries:
                logger.warning("concurrent_write_lost", action=action, attempts=attempt + 1, error=str(exc))
                raise Conflict(
                    "The record was modified concurrently, please retry",
                    action=action,
                ) from exc
            attempt += 1
            logger.info("concurrent_write_retry", action=action, attempt=attempt)
        except Exception:
            db.rollback()
            raise
