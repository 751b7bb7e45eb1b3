from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Optional, Union
from datetime import date, datetime


class AggregatedHit(BaseModel):
    """One (path, status, date) row with counts summed across hosts"""
    path: str
    http_status: str
    hit_on: date
    count: int


class HitCreate(BaseModel):
    """Payload for recording a hit. count/hit_on are checked by HitValidator."""
    host: str = Field(..., description="Host name the hit was served from")
    path: str = Field(..., description="Request path")
    http_status: str = Field(..., description="HTTP status exactly as observed")
    count: int = Field(..., description="Number of requests")
    hit_on: Union[datetime, date] = Field(..., description="Day of the hits (time of day is dropped)")


class HitResponse(BaseModel):
    """Serializes a Hit model (host is flattened to its name)"""
    id: int
    host: str
    path: str
    http_status: str
    count: int
    hit_on: date

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_hit(cls, hit) -> "HitResponse":
        return cls(
            id=hit.id,
            host=hit.host.host,
            path=hit.path,
            http_status=hit.http_status,
            count=hit.count,
            hit_on=hit.hit_on
        )


class HitSummary(BaseModel):
    most_recent_hit_on_date: date
    most_hits: int
    total_hits: int
    counts_by_status: Dict[str, int]
    aggregated: bool = False
    status: Optional[str] = None
