"""Keyword-based announcement severity classifier."""

from stockflow.models import Tier

CRITICAL_KEYWORDS: tuple[str, ...] = (
    "resignation",
    "director",
    "ceo",
    "cfo",
    "auditor",
    "fraud",
    "investigation",
    "penalty",
    "litigation",
    "default",
    "suspension",
    "sebi",
    "regulatory action",
)

IMPORTANT_KEYWORDS: tuple[str, ...] = (
    "board meeting",
    "agm",
    "egm",
    "dividend",
    "buyback",
    "acquisition",
    "merger",
    "financial results",
    "q1",
    "q2",
    "q3",
    "q4",
)

# Evaluated in order; the first tier with a matching keyword wins.
TIER_KEYWORDS: tuple[tuple[Tier, tuple[str, ...]], ...] = (
    (Tier.CRITICAL, CRITICAL_KEYWORDS),
    (Tier.IMPORTANT, IMPORTANT_KEYWORDS),
)


def classify(text: str | None) -> Tier:
    """Classify announcement text into a severity tier.

    Matching is a case-insensitive substring test. A text matching both
    critical and important keywords is critical.

    Args:
        text: Announcement description

    Returns:
        Matching tier, ROUTINE if no keyword matches
    """
    lowered = (text or "").lower()

    for tier, keywords in TIER_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return tier

    return Tier.ROUTINE
