"""Wiring of the notification pipeline from configuration."""

import httpx
from loguru import logger

from stockflow.ai.summarizer import build_summarizer
from stockflow.config import Config
from stockflow.delivery import DeliveryRouter, TelegramSender, WhatsAppSender
from stockflow.pipeline.cycle import CycleDependencies
from stockflow.pipeline.extractor import DocumentExtractor
from stockflow.sources.nse import NSEAnnouncementSource, SourceConfig
from stockflow.storage.repository import AlertRepository


def build_delivery_router(config: Config, client: httpx.AsyncClient) -> DeliveryRouter:
    """Create the router with a sender for every enabled channel.

    Args:
        config: Application configuration
        client: Shared HTTP client

    Returns:
        DeliveryRouter instance
    """
    telegram_config = config.notifications.telegram
    whatsapp_config = config.notifications.whatsapp

    telegram = None
    if telegram_config.enabled:
        telegram = TelegramSender(
            client,
            bot_token=telegram_config.bot_token,
            api_base=telegram_config.api_base,
            timeout=telegram_config.timeout,
        )

    whatsapp = None
    if whatsapp_config.enabled:
        whatsapp = WhatsAppSender(
            client,
            account_sid=whatsapp_config.account_sid,
            auth_token=whatsapp_config.auth_token,
            from_number=whatsapp_config.from_number,
            country_code=whatsapp_config.country_code,
            api_base=whatsapp_config.api_base,
            timeout=whatsapp_config.timeout,
        )

    logger.info(
        f"Delivery channels: telegram={'on' if telegram else 'off'}, "
        f"whatsapp={'on' if whatsapp else 'off'}"
    )
    return DeliveryRouter(telegram=telegram, whatsapp=whatsapp)


def build_cycle_dependencies(config: Config, client: httpx.AsyncClient) -> CycleDependencies:
    """Assemble every collaborator of an announcement check.

    Args:
        config: Application configuration
        client: Shared HTTP client for delivery, AI and attachment calls

    Returns:
        CycleDependencies instance

    Raises:
        ConfigurationError: If the AI provider is selected without a key
    """
    source = NSEAnnouncementSource(
        SourceConfig(
            url=config.monitoring.announcements_url,
            home_url=config.monitoring.home_url,
            timeout=config.monitoring.fetch_timeout,
        )
    )

    extractor = DocumentExtractor(
        client,
        timeout=config.documents.timeout,
        max_chars=config.documents.max_chars,
        min_chars=config.documents.min_chars,
    )

    return CycleDependencies(
        source=source,
        repository=AlertRepository(),
        router=build_delivery_router(config, client),
        summarizer=build_summarizer(config.ai, client),
        extractor=extractor,
    )
