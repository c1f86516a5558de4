"""Test tier-specific message composition."""

from datetime import date

import pytest

from stockflow.exceptions import ExtractionError, SummarizationError
from stockflow.models import Announcement, Tier
from stockflow.pipeline.composer import compose, context_hint, fallback_summary
from tests.fakes import FakeExtractor, FakeSummarizer


def make_announcement(**overrides) -> Announcement:
    values = {
        "seq_id": "101",
        "symbol": "RELIANCE",
        "description": "Resignation of Director",
        "attachment_url": None,
        "published_at": "15-Jan-2025 10:30:00",
        "company_name": "Reliance Industries Limited",
    }
    values.update(overrides)
    return Announcement(**values)


def test_fallback_summary_uses_company_name():
    """Test fallback text names the company."""
    assert fallback_summary(make_announcement()) == (
        "New announcement for Reliance Industries Limited (RELIANCE). "
        "Check the latest update on NSE."
    )


def test_fallback_summary_without_company_name():
    """Test fallback text falls back to the symbol."""
    text = fallback_summary(make_announcement(company_name=None))
    assert text.startswith("New announcement for RELIANCE (RELIANCE).")


def test_context_hint_first_match_wins():
    """Test board meeting hint is picked before dividend."""
    assert context_hint("Board meeting to consider dividend").startswith("📅 Board meeting")
    assert context_hint("Interim Dividend").startswith("💰 Dividend")
    assert context_hint("Q3 update").startswith("📢 Corporate announcement")


@pytest.mark.asyncio
async def test_routine_message():
    """Test routine template."""
    announcement = make_announcement(
        symbol="INFY",
        description="Copy of newspaper publication",
        company_name="Infosys Limited",
    )

    message = await compose(announcement, Tier.ROUTINE)

    assert message.startswith("🔔 *INFY Update*")
    assert "📋 Copy of newspaper publication" in message
    assert "🏢 Infosys Limited" in message
    assert "🕐 15-Jan-2025 10:30:00" in message
    assert message.endswith("_Routine disclosure - No immediate action required_")


@pytest.mark.asyncio
async def test_footer_defaults():
    """Test footer falls back to NSE and today's date."""
    announcement = make_announcement(company_name=None, published_at=None)

    message = await compose(announcement, Tier.ROUTINE, today=date(2025, 1, 5))

    assert "🏢 NSE\n🕐 05-Jan-2025" in message


@pytest.mark.asyncio
async def test_important_message_has_hint():
    """Test important template carries the context hint."""
    announcement = make_announcement(symbol="TCS", description="Board Meeting Intimation")

    message = await compose(announcement, Tier.IMPORTANT)

    assert message.startswith("⚡ *TCS - Important Update*")
    assert "📅 Board meeting scheduled." in message
    assert message.endswith("_Review recommended_")


@pytest.mark.asyncio
async def test_critical_without_summarizer_uses_fallback():
    """Test critical alert without AI still has an analysis block."""
    message = await compose(make_announcement(), Tier.CRITICAL)

    assert message.startswith("🚨 *RELIANCE - CRITICAL ALERT*")
    assert "🤖 *Quick Analysis:*\nNew announcement for Reliance Industries Limited" in message
    assert message.endswith("_⚠️ Immediate attention recommended_")


@pytest.mark.asyncio
async def test_critical_without_summarizer_skips_attachment():
    """Test the attachment is not downloaded when summarization is disabled."""
    extractor = FakeExtractor(text="Letter of resignation")
    announcement = make_announcement(attachment_url="https://nsearchives.nseindia.com/a.pdf")

    message = await compose(announcement, Tier.CRITICAL, summarizer=None, extractor=extractor)

    assert extractor.urls == []
    assert "New announcement for Reliance Industries Limited" in message


@pytest.mark.asyncio
async def test_critical_summarizer_failure_uses_fallback():
    """Test a failing provider degrades to the fallback sentence."""
    summarizer = FakeSummarizer(error=SummarizationError("timeout"))

    message = await compose(make_announcement(), Tier.CRITICAL, summarizer=summarizer)

    assert len(summarizer.calls) == 1
    assert "Check the latest update on NSE." in message


@pytest.mark.asyncio
async def test_critical_summarizes_attachment_text():
    """Test attachment text is appended to the description."""
    summarizer = FakeSummarizer(summary="- Director resigned citing personal reasons")
    extractor = FakeExtractor(text="Letter of resignation " * 20)
    announcement = make_announcement(attachment_url="https://nsearchives.nseindia.com/a.pdf")

    message = await compose(
        announcement, Tier.CRITICAL, summarizer=summarizer, extractor=extractor
    )

    assert extractor.urls == ["https://nsearchives.nseindia.com/a.pdf"]
    text, symbol, company = summarizer.calls[0]
    assert text.startswith("Resignation of Director\n\nLetter of resignation")
    assert symbol == "RELIANCE"
    assert company == "Reliance Industries Limited"
    assert "- Director resigned citing personal reasons" in message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "extractor",
    [FakeExtractor(text=""), FakeExtractor(error=ExtractionError("not a pdf"))],
)
async def test_critical_without_document_summarizes_description(extractor):
    """Test unreadable or failing attachments fall back to the description."""
    summarizer = FakeSummarizer()
    announcement = make_announcement(attachment_url="https://nsearchives.nseindia.com/a.pdf")

    await compose(announcement, Tier.CRITICAL, summarizer=summarizer, extractor=extractor)

    assert summarizer.calls[0][0] == "Resignation of Director"


@pytest.mark.asyncio
async def test_routine_and_important_make_no_ai_calls():
    """Test only the critical tier reaches the summarizer."""
    summarizer = FakeSummarizer()
    extractor = FakeExtractor(text="x" * 500)
    announcement = make_announcement(attachment_url="https://nsearchives.nseindia.com/a.pdf")

    await compose(announcement, Tier.ROUTINE, summarizer=summarizer, extractor=extractor)
    await compose(announcement, Tier.IMPORTANT, summarizer=summarizer, extractor=extractor)

    assert summarizer.calls == []
    assert extractor.urls == []
