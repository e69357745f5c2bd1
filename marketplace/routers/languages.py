from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace import schemas
from marketplace.db import get_db
from marketplace.services import languages

router = APIRouter(prefix="/api/v1/languages", tags=["languages"])


@router.get("", response_model=schemas.LanguageListOut)
def list_languages(db: Session = Depends(get_db)):
    return {"data": languages.list_languages(db)}
