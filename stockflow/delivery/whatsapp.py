"""Twilio WhatsApp alert sender."""

import httpx
from loguru import logger

from stockflow.exceptions import DeliveryError


def format_alert(symbol: str, message: str) -> str:
    return f"🔔 *StockFlow Alert*\n\n*{symbol}*\n\n{message}\n\n_Powered by StockFlow_"


class WhatsAppSender:
    """Sends alerts through the Twilio Messages API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        account_sid: str,
        auth_token: str,
        from_number: str,
        country_code: str = "91",
        api_base: str = "https://api.twilio.com",
        timeout: float = 10.0,
    ) -> None:
        self.client = client
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.country_code = country_code.lstrip("+")
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def recipient(self, phone_number: str) -> str:
        """Build the Twilio ``To`` address for a stored phone number."""
        number = phone_number.strip().replace(" ", "")
        if not number.startswith("+"):
            number = f"+{self.country_code}{number}"
        return f"whatsapp:{number}"

    def sender(self) -> str:
        if self.from_number.startswith("whatsapp:"):
            return self.from_number
        return f"whatsapp:{self.from_number}"

    async def send(self, phone_number: str, symbol: str, message: str) -> None:
        """Send an alert to a phone number.

        Raises:
            DeliveryError: If Twilio rejects the message or the request fails
        """
        url = f"{self.api_base}/2010-04-01/Accounts/{self.account_sid}/Messages.json"
        form = {
            "From": self.sender(),
            "To": self.recipient(phone_number),
            "Body": format_alert(symbol, message),
        }

        try:
            response = await self.client.post(
                url,
                data=form,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Twilio request failed: {e}") from e

        if not response.is_success:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            raise DeliveryError(f"Twilio rejected message ({response.status_code}): {detail}")

        logger.info(f"WhatsApp alert sent to {phone_number}")
