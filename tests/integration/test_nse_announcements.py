"""Integration tests for the NSE announcements source."""

import pytest

from stockflow.config import MonitoringConfig
from stockflow.sources import NSEAnnouncementSource, SourceConfig


@pytest.mark.integration
@pytest.mark.asyncio
async def test_nse_announcements_real_url():
    """Test source against the live NSE endpoint."""
    monitoring = MonitoringConfig()
    source = NSEAnnouncementSource(
        SourceConfig(
            url=monitoring.announcements_url,
            home_url=monitoring.home_url,
            timeout=30,
        )
    )

    try:
        announcements = await source.fetch()
    finally:
        await source.close()

    assert len(announcements) > 0
    for announcement in announcements:
        assert announcement.seq_id
        assert announcement.symbol
