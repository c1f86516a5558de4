"""Telegram Bot API alert sender."""

import httpx
from loguru import logger

from stockflow.exceptions import DeliveryError


def format_alert(symbol: str, message: str) -> str:
    return f"🔔 *StockFlow Alert*\n\n📊 *{symbol}*\n\n{message}\n\n_Powered by StockFlow_"


class TelegramSender:
    """Sends Markdown alerts through a Telegram bot."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        bot_token: str,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ) -> None:
        """Initialize Telegram sender.

        Args:
            client: Shared HTTP client
            bot_token: Bot token from BotFather
            api_base: Bot API base URL
            timeout: Request timeout in seconds
        """
        self.client = client
        self.bot_token = bot_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    async def send(self, chat_id: str, symbol: str, message: str) -> None:
        """Send an alert to a chat.

        Args:
            chat_id: Telegram chat id
            symbol: Stock symbol shown in the header
            message: Composed alert body

        Raises:
            DeliveryError: If the API call fails or Telegram answers ok=false
        """
        url = f"{self.api_base}/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": chat_id,
            "text": format_alert(symbol, message),
            "parse_mode": "Markdown",
        }

        try:
            response = await self.client.post(url, json=payload, timeout=self.timeout)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DeliveryError(f"Telegram request failed: {e}") from e

        if not response.is_success or not data.get("ok", False):
            description = data.get("description", f"HTTP {response.status_code}")
            raise DeliveryError(f"Telegram rejected message: {description}")

        logger.info(f"Telegram alert sent to chat {chat_id}")
