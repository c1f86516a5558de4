"""Routes composed alerts to each watcher's registered channel."""

from typing import Protocol

from loguru import logger

from stockflow.models import Channel, DeliveryResult, Watcher


class ChannelSender(Protocol):
    """Sends one message to one channel address."""

    async def send(self, address: str, symbol: str, message: str) -> None: ...


class DeliveryRouter:
    """Dispatches alerts by channel and turns every failure into a result."""

    def __init__(
        self,
        telegram: ChannelSender | None = None,
        whatsapp: ChannelSender | None = None,
    ) -> None:
        """Initialize delivery router.

        Args:
            telegram: Telegram sender, None when the channel is disabled
            whatsapp: WhatsApp sender, None when the channel is disabled
        """
        self.senders: dict[Channel, ChannelSender | None] = {
            Channel.TELEGRAM: telegram,
            Channel.WHATSAPP: whatsapp,
        }

    async def deliver(self, watcher: Watcher, symbol: str, message: str) -> DeliveryResult:
        """Send an alert to one watcher.

        Args:
            watcher: Recipient subscription
            symbol: Stock symbol
            message: Composed alert body

        Returns:
            DeliveryResult, never raises
        """
        try:
            channel = Channel((watcher.channel or "").lower())
        except ValueError:
            channel = None

        address = watcher.address
        if channel is None or not address:
            logger.warning(
                f"No valid contact info for user {watcher.user_id} "
                f"(login_method: {watcher.channel})"
            )
            return DeliveryResult(success=False, error="no valid contact", channel=watcher.channel)

        sender = self.senders.get(channel)
        if sender is None:
            logger.warning(f"{channel.value} delivery disabled, skipping user {watcher.user_id}")
            return DeliveryResult(
                success=False, error=f"{channel.value} disabled", channel=channel.value
            )

        try:
            await sender.send(address, symbol, message)
        except Exception as e:
            logger.error(f"Failed to send {channel.value} alert to {address}: {e}")
            return DeliveryResult(success=False, error=str(e), channel=channel.value)

        logger.info(f"Alert sent via {channel.value} to user {watcher.user_id}")
        return DeliveryResult(success=True, channel=channel.value)
