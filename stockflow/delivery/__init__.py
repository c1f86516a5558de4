from stockflow.delivery.router import ChannelSender, DeliveryRouter
from stockflow.delivery.telegram import TelegramSender
from stockflow.delivery.whatsapp import WhatsAppSender

__all__ = [
    "ChannelSender",
    "DeliveryRouter",
    "TelegramSender",
    "WhatsAppSender",
]
