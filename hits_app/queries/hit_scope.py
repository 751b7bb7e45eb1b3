"""
Composable queries over Hit records.

A HitScope wraps a SQLAlchemy query. Filters and orderings return a new
scope, so calls chain the way a report needs them:

    scope.without_zero_status_hits().with_status("404").aggregated().in_count_order()

Once a scope has been aggregated its rows are AggregatedHit values (one per
path, status and date, counts summed across hosts) instead of Hit models.
The summary methods (most_hits, total_hits, ...) accept from_aggregate=True
to compute over the aggregated shape; on a scope that is already aggregated
they always do.
"""

import datetime
from typing import Dict, Iterator, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload

from hits_app.models.hit import Hit
from hits_app.schemas.hit import AggregatedHit

# Summed count column of an aggregated query
SUMMED_COUNT = func.sum(Hit.count).label("hits_count")


class HitScope:
    """A chainable, lazily evaluated set of hits"""

    def __init__(self, db: Session, query: Optional[Query] = None, aggregated: bool = False):
        self.db = db
        self.query = query if query is not None else db.query(Hit)
        self.is_aggregated = aggregated

    def _spawn(self, query: Query, aggregated: Optional[bool] = None) -> "HitScope":
        if aggregated is None:
            aggregated = self.is_aggregated
        return HitScope(self.db, query, aggregated=aggregated)

    # Filters / orderings

    def without_zero_status_hits(self) -> "HitScope":
        """Drop hits whose status is only zeros ("0", "00", "000")"""
        return self._spawn(
            self.query.filter(func.replace(Hit.http_status, "0", "") != "")
        )

    def in_count_order(self) -> "HitScope":
        """Biggest count first, then status and path ascending, newest date first"""
        count_column = SUMMED_COUNT if self.is_aggregated else Hit.count
        return self._spawn(
            self.query.order_by(None).order_by(
                count_column.desc(),
                Hit.http_status.asc(),
                Hit.path.asc(),
                Hit.hit_on.desc()
            )
        )

    def with_status(self, status: str) -> "HitScope":
        """Only hits with exactly this status; "all" keeps everything"""
        if status == "all":
            return self._spawn(self.query)
        return self._spawn(self.query.filter(Hit.http_status == status))

    def with_hosts(self) -> "HitScope":
        """
        Load each hit's host in the same query. Chain it last, right before
        materializing; it is a no-op once aggregated.
        """
        if self.is_aggregated:
            return self._spawn(self.query)
        return self._spawn(self.query.options(joinedload(Hit.host)))

    def on_date(self, date: datetime.date) -> "HitScope":
        return self._spawn(self.query.filter(Hit.hit_on == date))

    def most_recent_hits(self, date: Optional[datetime.date] = None) -> "HitScope":
        """
        Hits for the given date, or for the most recent date in this scope.
        """
        if date is None:
            date = self.most_recent_hit_on_date()
        return self.on_date(date)

    def aggregated(self) -> "HitScope":
        """
        Collapse hits with the same path, status and date into one row,
        summing their counts regardless of host.
        """
        if self.is_aggregated:
            return self._spawn(self.query)
        query = (
            self.query
            .order_by(None)
            .with_entities(Hit.path, Hit.http_status, Hit.hit_on, SUMMED_COUNT)
            .group_by(Hit.path, Hit.http_status, Hit.hit_on)
        )
        return self._spawn(query, aggregated=True)

    # Summaries

    def _summary_source(self, from_aggregate: bool) -> "HitScope":
        if from_aggregate:
            return self.aggregated()
        return self

    def most_recent_hit_on_date(
        self,
        fallback_date: Optional[datetime.date] = None,
        from_aggregate: bool = False
    ) -> datetime.date:
        """
        The latest hit_on in the scope.

        Falls back to fallback_date (today when not given) if the scope is empty.
        """
        source = self._summary_source(from_aggregate)
        if source.is_aggregated:
            subquery = source.query.order_by(None).subquery()
            latest = self.db.query(func.max(subquery.c.hit_on)).scalar()
        else:
            latest = source.query.order_by(None).with_entities(func.max(Hit.hit_on)).scalar()

        if latest is None:
            return fallback_date if fallback_date is not None else datetime.date.today()
        return latest

    def most_hits(self, from_aggregate: bool = False) -> int:
        """Largest single count in the scope (0 when empty)"""
        source = self._summary_source(from_aggregate)
        if source.is_aggregated:
            subquery = source.query.order_by(None).subquery()
            biggest = self.db.query(func.max(subquery.c.hits_count)).scalar()
        else:
            biggest = source.query.order_by(None).with_entities(func.max(Hit.count)).scalar()
        return int(biggest or 0)

    def total_hits(self, from_aggregate: bool = False) -> int:
        """Sum of all counts in the scope (0 when empty)"""
        source = self._summary_source(from_aggregate)
        if source.is_aggregated:
            subquery = source.query.order_by(None).subquery()
            total = self.db.query(func.sum(subquery.c.hits_count)).scalar()
        else:
            total = source.query.order_by(None).with_entities(func.sum(Hit.count)).scalar()
        return int(total or 0)

    def counts_by_status(self, from_aggregate: bool = False) -> Dict[str, int]:
        """Total count per http_status ({} when empty)"""
        source = self._summary_source(from_aggregate)
        if source.is_aggregated:
            subquery = source.query.order_by(None).subquery()
            rows = (
                self.db.query(subquery.c.http_status, func.sum(subquery.c.hits_count))
                .group_by(subquery.c.http_status)
                .all()
            )
        else:
            rows = (
                source.query
                .order_by(None)
                .with_entities(Hit.http_status, func.sum(Hit.count))
                .group_by(Hit.http_status)
                .all()
            )
        return {status: int(total) for status, total in rows}

    # Materialization

    def all(self) -> List[Union[Hit, AggregatedHit]]:
        if not self.is_aggregated:
            return self.query.all()
        return [
            AggregatedHit(
                path=row.path,
                http_status=row.http_status,
                hit_on=row.hit_on,
                count=int(row.hits_count)
            )
            for row in self.query.all()
        ]

    def first(self) -> Optional[Union[Hit, AggregatedHit]]:
        if not self.is_aggregated:
            return self.query.first()
        rows = self.all()
        return rows[0] if rows else None

    def __iter__(self) -> Iterator[Union[Hit, AggregatedHit]]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())

    def __repr__(self) -> str:
        return f"<HitScope aggregated={self.is_aggregated}>"
