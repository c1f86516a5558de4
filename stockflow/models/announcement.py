"""Announcement domain models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Tier(str, Enum):
    """Announcement severity, highest priority first."""

    CRITICAL = "CRITICAL"
    IMPORTANT = "IMPORTANT"
    ROUTINE = "ROUTINE"


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Announcement:
    """Corporate disclosure item from the exchange feed.

    Identity is the feed's sequence id.
    """

    seq_id: str
    symbol: str
    description: str
    attachment_url: str | None = None
    published_at: str | None = None
    company_name: str | None = None

    @classmethod
    def from_feed(cls, record: dict[str, Any]) -> "Announcement | None":
        """Build an announcement from a raw NSE record.

        Args:
            record: Raw JSON object from the announcements endpoint

        Returns:
            Announcement, or None if the record carries no sequence id
        """
        seq_id = _text(record.get("seq_id"))
        if seq_id is None:
            return None

        return cls(
            seq_id=seq_id,
            symbol=_text(record.get("symbol")) or "",
            description=_text(record.get("desc")) or "",
            attachment_url=_text(record.get("attchmntFile")),
            published_at=_text(record.get("an_dt")),
            company_name=_text(record.get("sm_name")),
        )

    def __str__(self) -> str:
        return f"{self.symbol} [{self.seq_id}]: {self.description}"
