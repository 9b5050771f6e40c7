"""Pydantic models for API I/O."""

from .dashboard import (
    DashboardErrorResponse,
    DashboardFilterRequest,
    DashboardPageRequest,
    DashboardResponse,
)
from .segments import (
    SegmentedPlayerResponse,
    SegmentPageResponse,
    ThresholdsResponse,
    WindowResponse,
)

__all__ = [
    "DashboardErrorResponse",
    "DashboardFilterRequest",
    "DashboardPageRequest",
    "DashboardResponse",
    "SegmentedPlayerResponse",
    "SegmentPageResponse",
    "ThresholdsResponse",
    "WindowResponse",
]
