"""Test NSE announcements source."""

import httpx
import pytest

from stockflow.models import Announcement
from stockflow.sources import NSEAnnouncementSource, SessionState, SourceConfig

HOME_URL = "https://www.nseindia.com/"
FEED_URL = "https://www.nseindia.com/api/corporate-announcements?index=equities"

RECORD = {
    "seq_id": "501",
    "symbol": "TCS",
    "desc": "Board Meeting Intimation",
    "attchmntFile": "https://nsearchives.nseindia.com/corporate/TCS_501.pdf",
    "an_dt": "15-Jan-2025 17:45:12",
    "sm_name": "Tata Consultancy Services Limited",
}


class FakeNSE:
    """Mock transport handler counting home and feed requests."""

    def __init__(self, feed_responses: list[httpx.Response]) -> None:
        self.feed_responses = feed_responses
        self.home_calls = 0
        self.feed_calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == HOME_URL:
            self.home_calls += 1
            return httpx.Response(200, text="<html></html>")

        self.feed_calls += 1
        return self.feed_responses.pop(0)


def make_source(nse: FakeNSE) -> NSEAnnouncementSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(nse))
    return NSEAnnouncementSource(
        SourceConfig(url=FEED_URL, home_url=HOME_URL, timeout=10.0), client=client
    )


def test_from_feed_maps_fields():
    """Test feed field mapping."""
    announcement = Announcement.from_feed(RECORD)

    assert announcement == Announcement(
        seq_id="501",
        symbol="TCS",
        description="Board Meeting Intimation",
        attachment_url="https://nsearchives.nseindia.com/corporate/TCS_501.pdf",
        published_at="15-Jan-2025 17:45:12",
        company_name="Tata Consultancy Services Limited",
    )


def test_from_feed_without_seq_id():
    """Test records without an identifier are rejected."""
    assert Announcement.from_feed({"symbol": "TCS", "desc": "x"}) is None
    assert Announcement.from_feed({"seq_id": "  ", "symbol": "TCS"}) is None


def test_parse_payload_shapes():
    """Test bare and wrapped arrays are accepted, malformed items skipped."""
    bare = NSEAnnouncementSource.parse_payload([RECORD, "junk", {"symbol": "X"}])
    wrapped = NSEAnnouncementSource.parse_payload({"data": [RECORD]})

    assert [a.seq_id for a in bare] == ["501"]
    assert [a.seq_id for a in wrapped] == ["501"]
    assert NSEAnnouncementSource.parse_payload({"error": "busy"}) == []
    assert NSEAnnouncementSource.parse_payload(None) == []


@pytest.mark.asyncio
async def test_fetch_warms_session_first():
    """Test the home page is fetched before the API."""
    nse = FakeNSE([httpx.Response(200, json=[RECORD])])
    source = make_source(nse)

    announcements = await source.fetch()

    assert [a.symbol for a in announcements] == ["TCS"]
    assert nse.home_calls == 1
    assert source.state == SessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_fetch_reuses_session():
    """Test an authenticated session is not re-warmed."""
    nse = FakeNSE([httpx.Response(200, json=[RECORD]), httpx.Response(200, json={"data": []})])
    source = make_source(nse)

    await source.fetch()
    assert await source.fetch() == []

    assert nse.home_calls == 1
    assert nse.feed_calls == 2


@pytest.mark.asyncio
async def test_fetch_rewarms_once_on_403():
    """Test a rejected session is re-established and the call retried."""
    nse = FakeNSE([httpx.Response(403), httpx.Response(200, json={"data": [RECORD]})])
    source = make_source(nse)

    announcements = await source.fetch()

    assert len(announcements) == 1
    assert nse.home_calls == 2
    assert nse.feed_calls == 2
    assert source.state == SessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_fetch_gives_up_after_second_401():
    """Test a second rejection yields an empty batch without a third call."""
    nse = FakeNSE([httpx.Response(401), httpx.Response(401)])
    source = make_source(nse)

    assert await source.fetch() == []
    assert nse.feed_calls == 2
    assert source.state == SessionState.EXPIRED


@pytest.mark.asyncio
async def test_fetch_malformed_body():
    """Test a non-JSON body yields an empty batch."""
    nse = FakeNSE([httpx.Response(200, text="<html>Resource not found</html>")])
    source = make_source(nse)

    assert await source.fetch() == []


@pytest.mark.asyncio
async def test_fetch_server_error():
    """Test a 5xx yields an empty batch."""
    nse = FakeNSE([httpx.Response(503)])
    source = make_source(nse)

    assert await source.fetch() == []
    assert source.name == "nse_announcements"


@pytest.mark.asyncio
async def test_fetch_timeout_returns_empty():
    """Test a feed request that times out yields an empty batch."""

    class TimingOutNSE(FakeNSE):
        def __call__(self, request: httpx.Request) -> httpx.Response:
            if str(request.url) == FEED_URL:
                self.feed_calls += 1
                raise httpx.ReadTimeout("timed out", request=request)
            return super().__call__(request)

    nse = TimingOutNSE([])
    source = make_source(nse)

    assert await source.fetch() == []
    assert nse.feed_calls == 1
    assert source.state == SessionState.AUTHENTICATED
