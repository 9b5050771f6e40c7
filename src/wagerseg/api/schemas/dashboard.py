from __future__ import annotations

from pydantic import BaseModel, Field

from .segments import SegmentPageResponse, ThresholdsResponse, WindowResponse


class DashboardFilterRequest(BaseModel):
    time_from: int | None = None
    time_to: int | None = None
    high_roller_min_percentile: int | None = None
    low_roller_max_percentile: int | None = None


class DashboardPageRequest(BaseModel):
    page: int = Field(default=1, ge=1)


class DashboardErrorResponse(BaseModel):
    sequence: int
    message: str
    window: WindowResponse
    thresholds: ThresholdsResponse


class DashboardResponse(BaseModel):
    pending_window: WindowResponse
    pending_thresholds: ThresholdsResponse
    in_flight: int
    result: SegmentPageResponse | None = None
    error: DashboardErrorResponse | None = None
