from datetime import date
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from hits_app.dependencies import get_hit_service
from hits_app.exceptions import HitNotUniqueError, HitValidationError
from hits_app.queries.hit_scope import HitScope
from hits_app.schemas.hit import AggregatedHit, HitCreate, HitResponse, HitSummary
from hits_app.services.hit_service import HitService


router = APIRouter(prefix="/hits", tags=["hits"])


def _filtered_scope(
    hit_service: HitService,
    status_filter: str,
    exclude_zero_status: bool,
    aggregate: bool
) -> HitScope:
    scope = hit_service.scope().with_status(status_filter)
    if exclude_zero_status:
        scope = scope.without_zero_status_hits()
    if aggregate:
        scope = scope.aggregated()
    return scope


@router.get("/", response_model=List[Union[AggregatedHit, HitResponse]])
def list_hits(
    status_filter: str = Query("all", alias="status"),
    on: Optional[date] = None,
    most_recent: bool = False,
    aggregate: bool = False,
    exclude_zero_status: bool = True,
    hit_service: HitService = Depends(get_hit_service)
):
    """
    Hits in count order.

    status: exact http status or "all"
    on / most_recent: restrict to one day (most_recent picks the latest day)
    aggregate: sum counts across hosts
    """
    scope = _filtered_scope(hit_service, status_filter, exclude_zero_status, aggregate)
    if on is not None or most_recent:
        scope = scope.most_recent_hits(on)

    if aggregate:
        return scope.in_count_order().all()
    return [HitResponse.from_hit(hit) for hit in scope.in_count_order().with_hosts()]


@router.get("/summary", response_model=HitSummary)
def hits_summary(
    status_filter: str = Query("all", alias="status"),
    aggregate: bool = False,
    exclude_zero_status: bool = True,
    hit_service: HitService = Depends(get_hit_service)
):
    """Headline numbers for the dashboard"""
    scope = _filtered_scope(hit_service, status_filter, exclude_zero_status, aggregate)
    return HitSummary(
        most_recent_hit_on_date=scope.most_recent_hit_on_date(from_aggregate=aggregate),
        most_hits=scope.most_hits(from_aggregate=aggregate),
        total_hits=scope.total_hits(from_aggregate=aggregate),
        counts_by_status=scope.counts_by_status(from_aggregate=aggregate),
        aggregated=aggregate,
        status=status_filter
    )


@router.post("/", response_model=HitResponse, status_code=status.HTTP_201_CREATED)
def create_hit(
    hit_data: HitCreate,
    hit_service: HitService = Depends(get_hit_service)
):
    """Record a hit (validated and normalized before it is written)"""
    try:
        hit = hit_service.create_hit(**hit_data.model_dump())
    except HitValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors
        )
    except HitNotUniqueError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    return HitResponse.from_hit(hit)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def delete_hits(hit_service: HitService = Depends(get_hit_service)):
    """Remove every hit"""
    hit_service.delete_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
