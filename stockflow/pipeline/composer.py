"""Tier-specific notification message composition."""

from datetime import date

from loguru import logger

from stockflow.ai.summarizer import Summarizer
from stockflow.models import Announcement, Tier
from stockflow.pipeline.extractor import DocumentExtractor

DEFAULT_CONTEXT = "📢 Corporate announcement filed with exchange."

# First matching keyword wins.
CONTEXT_HINTS: tuple[tuple[str, str], ...] = (
    (
        "board meeting",
        "📅 Board meeting scheduled. May discuss financials, dividends, or strategic decisions.",
    ),
    ("dividend", "💰 Dividend announcement. Positive signal for shareholder returns."),
    ("agm", "👥 Annual General Meeting. Review company performance and vote on resolutions."),
    ("results", "📊 Financial results released. Check revenue, profit, and guidance."),
    ("acquisition", "🤝 M&A activity. Potential growth opportunity or strategic expansion."),
    ("buyback", "💵 Share buyback announced. Company confidence signal."),
)


def context_hint(text: str | None) -> str:
    """Pick the static context line for an important announcement."""
    lowered = (text or "").lower()
    for keyword, hint in CONTEXT_HINTS:
        if keyword in lowered:
            return hint
    return DEFAULT_CONTEXT


def fallback_summary(announcement: Announcement) -> str:
    """Deterministic text used when AI summarization is unavailable."""
    company = announcement.company_name or announcement.symbol
    return (
        f"New announcement for {company} ({announcement.symbol}). "
        "Check the latest update on NSE."
    )


def _footer(announcement: Announcement, today: date | None) -> str:
    published = announcement.published_at or (today or date.today()).strftime("%d-%b-%Y")
    return f"🏢 {announcement.company_name or 'NSE'}\n🕐 {published}"


def compose_routine(announcement: Announcement, today: date | None = None) -> str:
    return (
        f"🔔 *{announcement.symbol} Update*\n\n"
        f"📋 {announcement.description}\n\n"
        f"{_footer(announcement, today)}\n\n"
        "_Routine disclosure - No immediate action required_"
    )


def compose_important(announcement: Announcement, today: date | None = None) -> str:
    return (
        f"⚡ *{announcement.symbol} - Important Update*\n\n"
        f"📋 {announcement.description}\n\n"
        f"{context_hint(announcement.description)}\n\n"
        f"{_footer(announcement, today)}\n\n"
        "_Review recommended_"
    )


async def critical_insight(
    announcement: Announcement,
    summarizer: Summarizer | None,
    extractor: DocumentExtractor | None,
) -> str:
    """Produce the analysis block of a critical alert.

    Tries attachment text first, then the bare description, and finally
    the fallback sentence. Never raises.
    """
    if summarizer is None:
        return fallback_summary(announcement)

    text = announcement.description
    if announcement.attachment_url and extractor is not None:
        try:
            document_text = await extractor.extract(announcement.attachment_url)
        except Exception as e:
            logger.warning(f"Attachment extraction failed for {announcement.symbol}: {e}")
        else:
            if document_text:
                text = f"{announcement.description}\n\n{document_text}"

    try:
        return await summarizer.summarize(
            text, announcement.symbol, announcement.company_name or announcement.symbol
        )
    except Exception as e:
        logger.warning(f"AI summary failed for {announcement.symbol}, using fallback: {e}")
        return fallback_summary(announcement)


async def compose_critical(
    announcement: Announcement,
    summarizer: Summarizer | None = None,
    extractor: DocumentExtractor | None = None,
    today: date | None = None,
) -> str:
    insight = await critical_insight(announcement, summarizer, extractor)
    return (
        f"🚨 *{announcement.symbol} - CRITICAL ALERT*\n\n"
        f"📋 {announcement.description}\n\n"
        f"🤖 *Quick Analysis:*\n{insight}\n\n"
        f"{_footer(announcement, today)}\n\n"
        "_⚠️ Immediate attention recommended_"
    )


async def compose(
    announcement: Announcement,
    tier: Tier,
    *,
    summarizer: Summarizer | None = None,
    extractor: DocumentExtractor | None = None,
    today: date | None = None,
) -> str:
    """Build the notification body for an announcement.

    Only the critical tier performs network calls (attachment download and
    AI summary); routine and important messages are pure templates.

    Args:
        announcement: Announcement to describe
        tier: Severity tier from the classifier
        summarizer: AI summarizer for critical alerts
        extractor: Attachment extractor for critical alerts
        today: Date shown when the feed carries no publish date

    Returns:
        Message text, never empty
    """
    if tier is Tier.CRITICAL:
        return await compose_critical(announcement, summarizer, extractor, today)
    if tier is Tier.IMPORTANT:
        return compose_important(announcement, today)
    return compose_routine(announcement, today)
