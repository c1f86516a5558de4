from stockflow.models.announcement import Announcement, Tier
from stockflow.models.watcher import Channel, DeliveryResult, Watcher

__all__ = [
    "Announcement",
    "Channel",
    "DeliveryResult",
    "Tier",
    "Watcher",
]
