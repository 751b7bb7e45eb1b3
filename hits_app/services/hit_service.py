import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hits_app.exceptions import HitNotUniqueError, HitValidationError
from hits_app.models.hit import Hit
from hits_app.models.host import Host
from hits_app.queries.hit_scope import HitScope
from hits_app.services.hit_validator import HitValidator

logger = logging.getLogger(__name__)


class HitService:
    """
    Hit service: the create path and the entry point for hit queries.

    The session is injected (not created internally), so the API uses the
    request session and tests use their own throwaway database.
    """

    def __init__(self, db: Session, validator: Optional[HitValidator] = None):
        """
        Initialize hit service with dependencies.

        Args:
            db: Database session
            validator: Hit validator (defaults to one bound to the same session)
        """
        self.db = db
        self.validator = validator or HitValidator(db)

    def scope(self) -> HitScope:
        """All hits, ready to be filtered / aggregated"""
        return HitScope(self.db)

    def get_or_create_host(self, name: str) -> Host:
        """Find a host by name, creating it if needed (flushed, not committed)"""
        host = self.db.query(Host).filter(Host.host == name).first()
        if host is None:
            host = Host(host=name)
            self.db.add(host)
            self.db.flush()
            logger.info("Created host", extra={"host": name})
        return host

    def build_hit(
        self,
        host: Union[Host, str, None] = None,
        path: Optional[str] = None,
        http_status: Optional[str] = None,
        count=None,
        hit_on: Union[date, datetime, None] = None
    ) -> Hit:
        """Build an unsaved hit. A host given by name is looked up or created."""
        if isinstance(host, str):
            host = self.get_or_create_host(host)
        return Hit(host=host, path=path, http_status=http_status, count=count, hit_on=hit_on)

    def validate(self, hit: Hit) -> Dict[str, List[str]]:
        """Normalize the hit and return its validation errors (empty when valid)"""
        return self.validator.validate(hit)

    def save(self, hit: Hit) -> Hit:
        """
        Validate and persist a hit.

        Raises:
            HitValidationError: the hit is invalid, nothing is written
                (a host created for it by build_hit is rolled back too)
            HitNotUniqueError: the database rejected a duplicate
                (only reachable when the uniqueness check is left to the db)
        """
        try:
            self.validator.validate_or_raise(hit)
        except HitValidationError:
            self.db.rollback()
            raise

        self.db.add(hit)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            message = str(e.orig).lower()
            if "unique" in message or "duplicate" in message:
                logger.warning(
                    "Database rejected duplicate hit",
                    extra={"path": hit.path, "http_status": hit.http_status, "hit_on": str(hit.hit_on)}
                )
                raise HitNotUniqueError() from e
            raise

        self.db.refresh(hit)
        return hit

    def create_hit(
        self,
        host: Union[Host, str],
        path: str,
        http_status: str,
        count,
        hit_on: Union[date, datetime]
    ) -> Hit:
        """Build and save a hit in one go"""
        hit = self.build_hit(host=host, path=path, http_status=http_status, count=count, hit_on=hit_on)
        return self.save(hit)

    def delete_all(self) -> int:
        """Remove every hit. Returns the number of rows deleted."""
        deleted = self.db.query(Hit).delete(synchronize_session=False)
        self.db.commit()
        logger.info("Deleted all hits", extra={"deleted": deleted})
        return deleted
