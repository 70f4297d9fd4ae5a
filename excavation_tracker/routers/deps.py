from fastapi import Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..storage import DbStorage


def get_storage(db: Session = Depends(get_db)) -> DbStorage:
    return DbStorage(db)
