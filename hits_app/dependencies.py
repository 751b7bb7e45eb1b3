"""
FastAPI dependencies for dependency injection.

Routes depend on the service, the service depends on the session.
Tests override get_db to point everything at a throwaway database.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from hits_app.database.connection import get_db
from hits_app.services.hit_service import HitService


def get_hit_service(db: Session = Depends(get_db)) -> HitService:
    """Get HitService bound to the request's database session"""
    return HitService(db=db)
