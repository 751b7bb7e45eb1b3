"""
Validation and normalization rules for Hit records.

Every call to validate() first normalizes the record:
- path_hash is (re)computed from path
- hit_on is truncated to its calendar day
then checks presence, lengths, count and uniqueness.
"""

import hashlib
import logging
import numbers
import re
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from hits_app.config import settings
from hits_app.exceptions import HitValidationError
from hits_app.models.hit import Hit

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def hash_path(path: str) -> str:
    """SHA-1 hex digest of a path (fixed 40 chars, used by the unique index)"""
    return hashlib.sha1(path.encode("utf-8")).hexdigest()


def normalize_hit_on(value):
    """Drop any time-of-day component, hits are date precise"""
    if isinstance(value, datetime):
        return value.date()
    return value


class HitValidator:
    """
    Validates Hit records before they are written.

    leave_uniqueness_check_to_db is process-wide: when True the
    (host, path_hash, http_status, hit_on) lookup is skipped and a duplicate
    only fails once the database unique constraint rejects it.
    Anything that flips it must put it back.
    """

    leave_uniqueness_check_to_db: bool = settings.leave_uniqueness_check_to_db

    def __init__(
        self,
        db: Session,
        max_path_length: int = settings.max_path_length,
        max_http_status_length: int = settings.max_http_status_length
    ):
        self.db = db
        self.max_path_length = max_path_length
        self.max_http_status_length = max_http_status_length

    def validate(self, hit: Hit) -> Dict[str, List[str]]:
        """
        Normalize the hit in place and collect validation errors.

        Returns:
            Mapping of field name -> error messages (empty when valid)
        """
        self._normalize(hit)

        errors: Dict[str, List[str]] = defaultdict(list)

        if hit.host is None and hit.host_id is None:
            errors["host"].append("can't be blank")

        if self._blank(hit.path):
            errors["path"].append("can't be blank")
        elif len(hit.path) > self.max_path_length:
            errors["path"].append(f"is too long (maximum is {self.max_path_length} characters)")

        if self._blank(hit.http_status):
            errors["http_status"].append("can't be blank")
        elif len(hit.http_status) > self.max_http_status_length:
            errors["http_status"].append(
                f"is too long (maximum is {self.max_http_status_length} characters)"
            )

        count_error = self._check_count(hit)
        if count_error:
            errors["count"].append(count_error)

        if hit.hit_on is None:
            errors["hit_on"].append("can't be blank")
        elif not isinstance(hit.hit_on, date):
            errors["hit_on"].append("is not a date")

        if not errors and not self.leave_uniqueness_check_to_db and self._duplicate_exists(hit):
            errors["path"].append("has already been taken for this host, status and date")

        if errors:
            logger.info("Hit failed validation", extra={"errors": dict(errors), "path": hit.path})
        return dict(errors)

    def is_valid(self, hit: Hit) -> bool:
        return not self.validate(hit)

    def validate_or_raise(self, hit: Hit) -> None:
        errors = self.validate(hit)
        if errors:
            raise HitValidationError(errors)

    def _normalize(self, hit: Hit) -> None:
        if isinstance(hit.path, str):
            hit.path_hash = hash_path(hit.path)
        hit.hit_on = normalize_hit_on(hit.hit_on)

    @staticmethod
    def _blank(value) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())

    @staticmethod
    def _check_count(hit: Hit) -> Optional[str]:
        value = hit.count
        if value is None or (isinstance(value, str) and not value.strip()):
            return "can't be blank"
        if isinstance(value, bool):
            return "is not a number"
        if isinstance(value, str):
            if not _INTEGER_RE.match(value.strip()):
                try:
                    float(value)
                except ValueError:
                    return "is not a number"
                return "must be an integer"
            value = int(value.strip())
            hit.count = value
        elif isinstance(value, numbers.Integral):
            value = int(value)
            hit.count = value
        elif isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
            value = int(value)
            hit.count = value
        elif isinstance(value, (float, Decimal)):
            return "must be an integer"
        else:
            return "is not a number"
        if value <= 0:
            return "must be greater than 0"
        return None

    def _duplicate_exists(self, hit: Hit) -> bool:
        host_id = hit.host_id if hit.host_id is not None else hit.host.id
        if host_id is None:
            # Host not saved yet, nothing can clash with it
            return False

        with self.db.no_autoflush:
            query = self.db.query(Hit.id).filter(
                Hit.host_id == host_id,
                Hit.path_hash == hit.path_hash,
                Hit.http_status == hit.http_status,
                Hit.hit_on == hit.hit_on
            )
            if hit.id is not None:
                query = query.filter(Hit.id != hit.id)
            return query.first() is not None
