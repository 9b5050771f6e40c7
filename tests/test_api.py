import pytest
from httpx import ASGITransport, AsyncClient

from wagerseg.api import create_app
from wagerseg.errors import SourceUnavailable
from wagerseg.models import PlayerAggregate, QueryWindow
from wagerseg.sources import StaticAggregateSource


class SwitchableSource:
    def __init__(self, aggregates: list[PlayerAggregate]):
        self.aggregates = aggregates
        self.available = True
        self.windows: list[QueryWindow] = []

    async def fetch(self, window: QueryWindow) -> list[PlayerAggregate]:
        self.windows.append(window)
        if not self.available:
            raise SourceUnavailable("aggregate service timed out", window)
        return list(self.aggregates)


def _players(count: int) -> list[PlayerAggregate]:
    return [
        PlayerAggregate(
            player=f"player-{idx:02d}",
            total_wagered=float(1000 + idx * 250),
            avg_wager=float(100 + idx * 25),
            game_count=10,
        )
        for idx in range(count)
    ]


@pytest.fixture
def source() -> SwitchableSource:
    return SwitchableSource(_players(23))


@pytest.fixture
async def client(source: SwitchableSource):
    app = create_app(source)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


def _sample_aggregates_csv() -> str:
    return """player,total_wagered,avg_wager,game_count
P1,1000,100,10
P2,500,50,10
P3,100,10,10
"""


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_segments_first_page(client: AsyncClient, source: SwitchableSource):
    resp = await client.get("/segments", params={"timeFrom": 100, "timeTo": 200})
    assert resp.status_code == 200
    body = resp.json()

    assert source.windows == [QueryWindow(100, 200)]
    assert body["total_players"] == 23
    assert body["total_pages"] == 3
    assert body["current_page"] == 1
    assert body["page_size"] == 10
    assert len(body["players"]) == 10
    assert body["players"][0]["player"] == "player-22"
    assert body["players"][0]["segment"] == "HighRoller"
    assert sum(body["segment_counts"].values()) == 23
    assert set(body["segment_counts"]) == {"HighRoller", "MidRoller", "LowRoller"}
    assert body["thresholds"] == {"high_roller_min_percentile": 80, "low_roller_max_percentile": 20}


@pytest.mark.anyio
async def test_segments_last_and_past_end_pages(client: AsyncClient):
    last = (await client.get("/segments", params={"page": 3})).json()
    assert len(last["players"]) == 3

    past = (await client.get("/segments", params={"page": 9})).json()
    assert past["players"] == []
    assert past["total_pages"] == 3


@pytest.mark.anyio
async def test_segments_custom_thresholds(client: AsyncClient):
    resp = await client.get(
        "/segments",
        params={"highRollerMinPercentile": 50, "lowRollerMaxPercentile": 50},
    )
    body = resp.json()
    assert body["segment_counts"]["MidRoller"] == 0


@pytest.mark.anyio
async def test_segments_invalid_parameters(client: AsyncClient):
    resp = await client.get("/segments", params={"highRollerMinPercentile": 150})
    assert resp.status_code == 400

    resp = await client.get("/segments", params={"timeFrom": 500, "timeTo": 100})
    assert resp.status_code == 400

    resp = await client.get("/segments", params={"page": 0})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_segments_source_unavailable(client: AsyncClient, source: SwitchableSource):
    source.available = False
    resp = await client.get("/segments")
    assert resp.status_code == 502
    assert "timed out" in resp.json()["detail"]


@pytest.mark.anyio
async def test_export_csv(client: AsyncClient):
    resp = await client.get("/segments/export.csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0] == "player,segment,percentile,avg_wager,total_wagered,game_count"
    assert len(lines) == 24


@pytest.mark.anyio
async def test_upload_classifies_csv(client: AsyncClient, source: SwitchableSource):
    files = {"aggregates": ("aggregates.csv", _sample_aggregates_csv(), "text/csv")}
    resp = await client.post("/segments/upload", files=files)
    assert resp.status_code == 200
    body = resp.json()

    segments = {player["player"]: player["segment"] for player in body["players"]}
    assert segments == {"P1": "HighRoller", "P2": "MidRoller", "P3": "LowRoller"}
    assert body["segment_counts"] == {"HighRoller": 1, "MidRoller": 1, "LowRoller": 1}
    assert source.windows == []


@pytest.mark.anyio
async def test_upload_rejects_bad_csv(client: AsyncClient):
    files = {"aggregates": ("aggregates.csv", "player,total_wagered\nx,abc\n", "text/csv")}
    resp = await client.post("/segments/upload", files=files)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_upload_rejects_missing_column(client: AsyncClient):
    body = "player,total,game_count\nwhale,90000,10\nminnow,5,10\n"
    files = {"aggregates": ("aggregates.csv", body, "text/csv")}
    resp = await client.post("/segments/upload", files=files)
    assert resp.status_code == 400
    assert "total_wagered" in resp.json()["detail"]


@pytest.mark.anyio
async def test_dashboard_lifecycle(client: AsyncClient, source: SwitchableSource):
    initial = (await client.get("/dashboard")).json()
    assert initial["result"] is None
    assert initial["error"] is None

    resp = await client.post(
        "/dashboard/filters",
        json={"time_from": 10, "time_to": 20, "high_roller_min_percentile": 90},
    )
    pending = resp.json()
    assert pending["pending_window"] == {"time_from": 10, "time_to": 20}
    assert pending["pending_thresholds"]["high_roller_min_percentile"] == 90
    assert pending["result"] is None
    assert source.windows == []

    applied = (await client.post("/dashboard/apply")).json()
    assert source.windows == [QueryWindow(10, 20)]
    assert applied["result"]["current_page"] == 1
    assert applied["result"]["total_pages"] == 3

    nxt = (await client.post("/dashboard/page/next")).json()
    assert nxt["result"]["current_page"] == 2
    assert nxt["result"]["players"][0]["player"] == "player-12"

    jumped = (await client.post("/dashboard/page", json={"page": 3})).json()
    assert jumped["result"]["current_page"] == 3
    assert len(jumped["result"]["players"]) == 3

    clamped = (await client.post("/dashboard/page/next")).json()
    assert clamped["result"]["current_page"] == 3

    back = (await client.post("/dashboard/page/previous")).json()
    assert back["result"]["current_page"] == 2
    assert len(source.windows) == 1


@pytest.mark.anyio
async def test_dashboard_window_edges_set_separately(client: AsyncClient, source: SwitchableSource):
    first = await client.post("/dashboard/filters", json={"time_from": 1000})
    assert first.status_code == 200

    second = await client.post("/dashboard/filters", json={"time_to": 5000})
    assert second.status_code == 200
    assert second.json()["pending_window"] == {"time_from": 1000, "time_to": 5000}

    await client.post("/dashboard/apply")
    assert source.windows == [QueryWindow(1000, 5000)]


@pytest.mark.anyio
async def test_dashboard_page_jump_is_clamped(client: AsyncClient):
    await client.post("/dashboard/apply")

    jumped = (await client.post("/dashboard/page", json={"page": 7})).json()
    assert jumped["result"]["current_page"] == 3
    assert jumped["result"]["total_pages"] == 3
    assert len(jumped["result"]["players"]) == 3

    back = (await client.post("/dashboard/page/previous")).json()
    assert back["result"]["current_page"] == 2


@pytest.mark.anyio
async def test_dashboard_failure_keeps_last_result(client: AsyncClient, source: SwitchableSource):
    await client.post("/dashboard/apply")

    source.available = False
    resp = await client.post("/dashboard/apply")
    assert resp.status_code == 502

    state = (await client.get("/dashboard")).json()
    assert state["result"]["total_players"] == 23
    assert state["error"]["message"] == "aggregate service timed out"


@pytest.mark.anyio
async def test_dashboard_rejects_invalid_filters(client: AsyncClient):
    resp = await client.post("/dashboard/filters", json={"low_roller_max_percentile": 101})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_empty_source_returns_zero_counts():
    app = create_app(StaticAggregateSource())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        body = (await client.get("/segments")).json()

    assert body["players"] == []
    assert body["total_pages"] == 0
    assert body["segment_counts"] == {"HighRoller": 0, "MidRoller": 0, "LowRoller": 0}
