"""REST API for player wagering segmentation."""

from __future__ import annotations

import logging
from typing import Sequence

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from wagerseg.api.schemas import (
    DashboardErrorResponse,
    DashboardFilterRequest,
    DashboardPageRequest,
    DashboardResponse,
    SegmentedPlayerResponse,
    SegmentPageResponse,
    ThresholdsResponse,
    WindowResponse,
)
from wagerseg.config import Settings, load_settings
from wagerseg.errors import InvalidParameters, SourceUnavailable
from wagerseg.models import QueryWindow, SegmentedPlayer, ThresholdConfig
from wagerseg.query import QueryResult, SegmentQueryEngine, run_query
from wagerseg.segmentation import PAGE_SIZE, counts_by_label, export_segments_to_csv, page, total_pages
from wagerseg.sources import (
    AggregateSource,
    HttpAggregateSource,
    SqliteWagerStore,
    StaticAggregateSource,
    parse_aggregate_csv,
)


logger = logging.getLogger("uvicorn.error")


def _window_to_response(window: QueryWindow) -> WindowResponse:
    return WindowResponse(time_from=window.time_from, time_to=window.time_to)


def _thresholds_to_response(thresholds: ThresholdConfig) -> ThresholdsResponse:
    return ThresholdsResponse(
        high_roller_min_percentile=thresholds.high_roller_min_percentile,
        low_roller_max_percentile=thresholds.low_roller_max_percentile,
    )


def _player_to_response(player: SegmentedPlayer) -> SegmentedPlayerResponse:
    return SegmentedPlayerResponse(
        player=player.player,
        segment=player.segment.value,
        avg_wager=player.avg_wager,
        total_wagered=player.total_wagered,
        game_count=player.game_count,
        percentile=player.percentile,
    )


def _page_response(
    result: QueryResult,
    *,
    page_number: int,
    page_size: int = PAGE_SIZE,
    items: Sequence[SegmentedPlayer] | None = None,
) -> SegmentPageResponse:
    if items is None:
        items = page(result.segmented, page_number, page_size)
    return SegmentPageResponse(
        window=_window_to_response(result.window),
        thresholds=_thresholds_to_response(result.thresholds),
        segment_counts=counts_by_label(result.segment_counts),
        total_players=result.total_players,
        current_page=page_number,
        total_pages=total_pages(result.total_players, page_size),
        page_size=page_size,
        players=[_player_to_response(player) for player in items],
    )


def _build_parameters(
    time_from: int | None,
    time_to: int | None,
    high: int | None,
    low: int | None,
    defaults: ThresholdConfig,
) -> tuple[QueryWindow, ThresholdConfig]:
    try:
        window = QueryWindow.from_optional(time_from, time_to)
        thresholds = ThresholdConfig(
            high_roller_min_percentile=defaults.high_roller_min_percentile if high is None else high,
            low_roller_max_percentile=defaults.low_roller_max_percentile if low is None else low,
        )
    except InvalidParameters as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return window, thresholds


def _default_source(settings: Settings) -> AggregateSource:
    if settings.source_url:
        logger.info("Using remote aggregate source at %s", settings.source_url)
        return HttpAggregateSource(
            settings.source_url,
            auth_token=settings.source_token,
            timeout=settings.source_timeout,
        )
    return SqliteWagerStore(settings.db_path)


def _dashboard_response(engine: SegmentQueryEngine) -> DashboardResponse:
    result = engine.result
    failure = engine.last_error
    return DashboardResponse(
        pending_window=_window_to_response(engine.pending_window),
        pending_thresholds=_thresholds_to_response(engine.pending_thresholds),
        in_flight=engine.in_flight,
        result=(
            _page_response(
                result,
                page_number=engine.current_page,
                page_size=engine.page_size,
                items=engine.page_items,
            )
            if result is not None
            else None
        ),
        error=(
            DashboardErrorResponse(
                sequence=failure.sequence,
                message=failure.message,
                window=_window_to_response(failure.window),
                thresholds=_thresholds_to_response(failure.thresholds),
            )
            if failure is not None
            else None
        ),
    )


def create_app(
    source: AggregateSource | None = None,
    *,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="wagerseg")
    source = source or _default_source(settings)
    default_thresholds = settings.default_thresholds
    engine = SegmentQueryEngine(source, thresholds=default_thresholds)
    app.state.source = source
    app.state.engine = engine

    async def _execute(window: QueryWindow, thresholds: ThresholdConfig) -> QueryResult:
        try:
            return await run_query(source, window, thresholds)
        except SourceUnavailable as exc:
            raise HTTPException(status_code=502, detail=exc.message) from exc

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/segments", response_model=SegmentPageResponse)
    async def segments(
        time_from: int | None = Query(None, alias="timeFrom"),
        time_to: int | None = Query(None, alias="timeTo"),
        high_roller_min_percentile: int | None = Query(None, alias="highRollerMinPercentile"),
        low_roller_max_percentile: int | None = Query(None, alias="lowRollerMaxPercentile"),
        page_number: int = Query(1, alias="page", ge=1),
    ):
        window, thresholds = _build_parameters(
            time_from,
            time_to,
            high_roller_min_percentile,
            low_roller_max_percentile,
            default_thresholds,
        )
        result = await _execute(window, thresholds)
        return _page_response(result, page_number=page_number)

    @app.get("/segments/export.csv")
    async def export_segments(
        time_from: int | None = Query(None, alias="timeFrom"),
        time_to: int | None = Query(None, alias="timeTo"),
        high_roller_min_percentile: int | None = Query(None, alias="highRollerMinPercentile"),
        low_roller_max_percentile: int | None = Query(None, alias="lowRollerMaxPercentile"),
    ):
        window, thresholds = _build_parameters(
            time_from,
            time_to,
            high_roller_min_percentile,
            low_roller_max_percentile,
            default_thresholds,
        )
        result = await _execute(window, thresholds)
        return Response(
            content=export_segments_to_csv(result.segmented),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=segments.csv"},
        )

    @app.post("/segments/upload", response_model=SegmentPageResponse)
    async def upload_segments(
        aggregates: UploadFile = File(...),
        high_roller_min_percentile: int | None = Form(None),
        low_roller_max_percentile: int | None = Form(None),
        page_number: int = Form(1, alias="page", ge=1),
    ):
        contents = await aggregates.read()
        if not contents:
            raise HTTPException(status_code=400, detail="aggregates file is empty")
        try:
            rows = parse_aggregate_csv(contents.decode("utf-8-sig"))
        except (UnicodeDecodeError, ValueError, KeyError) as exc:
            raise HTTPException(status_code=400, detail=f"Invalid aggregates CSV: {exc}") from exc
        window, thresholds = _build_parameters(
            None,
            None,
            high_roller_min_percentile,
            low_roller_max_percentile,
            default_thresholds,
        )
        result = await run_query(StaticAggregateSource(rows), window, thresholds)
        return _page_response(result, page_number=page_number)

    @app.get("/dashboard", response_model=DashboardResponse)
    async def dashboard():
        return _dashboard_response(engine)

    @app.post("/dashboard/filters", response_model=DashboardResponse)
    async def dashboard_filters(payload: DashboardFilterRequest):
        edits = payload.model_dump(include=payload.model_fields_set, exclude_none=True)
        try:
            if edits.keys() & {"time_from", "time_to"}:
                engine.set_window(edits.get("time_from"), edits.get("time_to"))
            if edits.keys() & {"high_roller_min_percentile", "low_roller_max_percentile"}:
                engine.set_thresholds(
                    edits.get("high_roller_min_percentile"),
                    edits.get("low_roller_max_percentile"),
                )
        except InvalidParameters as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _dashboard_response(engine)

    @app.post("/dashboard/apply", response_model=DashboardResponse)
    async def dashboard_apply():
        try:
            await engine.apply_filters()
        except SourceUnavailable as exc:
            raise HTTPException(status_code=502, detail=exc.message) from exc
        return _dashboard_response(engine)

    @app.post("/dashboard/page", response_model=DashboardResponse)
    async def dashboard_page(payload: DashboardPageRequest):
        engine.set_page(payload.page)
        return _dashboard_response(engine)

    @app.post("/dashboard/page/next", response_model=DashboardResponse)
    async def dashboard_next_page():
        engine.next_page()
        return _dashboard_response(engine)

    @app.post("/dashboard/page/previous", response_model=DashboardResponse)
    async def dashboard_previous_page():
        engine.previous_page()
        return _dashboard_response(engine)

    return app


__all__ = ["create_app", "main"]


def main() -> None:
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="Serve the wagerseg REST API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    uvicorn.run("wagerseg.api:create_app", factory=True, host=args.host, port=args.port)
