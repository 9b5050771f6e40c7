from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class SegmentedPlayerResponse(BaseModel):
    player: str
    segment: str
    avg_wager: float
    total_wagered: float
    game_count: int
    percentile: float


class WindowResponse(BaseModel):
    time_from: int
    time_to: int


class ThresholdsResponse(BaseModel):
    high_roller_min_percentile: int
    low_roller_max_percentile: int


class SegmentPageResponse(BaseModel):
    window: WindowResponse
    thresholds: ThresholdsResponse
    segment_counts: Dict[str, int]
    total_players: int
    current_page: int
    total_pages: int
    page_size: int
    players: List[SegmentedPlayerResponse]
