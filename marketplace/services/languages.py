from __future__ import annotations

from sqlalchemy import asc, func
from sqlalchemy.orm import Session

from marketplace import models


def find_language(db: Session, language_id: int) -> models.Language | None:
    return db.query(models.Language).filter(models.Language.id == language_id).first()


def find_language_by_code(db: Session, code: str | None) -> models.Language | None:
    cleaned = (code or "").strip().lower()
    if not cleaned:
        return None
    return db.query(models.Language).filter(func.lower(models.Language.code) == cleaned).first()


def get_default_language(db: Session) -> models.Language | None:
    return (
        db.query(models.Language)
        .filter(models.Language.is_default.is_(True))
        .order_by(asc(models.Language.id))
        .first()
    )


def list_languages(db: Session) -> list[models.Language]:
    return db.query(models.Language).order_by(asc(models.Language.code)).all()
