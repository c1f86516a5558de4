"""Subscription and delivery models."""

from dataclasses import dataclass
from enum import Enum


class Channel(str, Enum):
    """Registered delivery channel of a user."""

    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"


@dataclass(frozen=True)
class Watcher:
    """A verified user's enabled subscription to one symbol."""

    user_id: int
    symbol: str
    channel: str | None
    phone_number: str | None = None
    telegram_chat_id: str | None = None

    @property
    def address(self) -> str | None:
        """Channel address matching the registered channel."""
        channel = (self.channel or "").lower()
        if channel == Channel.TELEGRAM:
            return self.telegram_chat_id
        if channel == Channel.WHATSAPP:
            return self.phone_number
        return None


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one delivery attempt."""

    success: bool
    error: str | None = None
    channel: str | None = None
