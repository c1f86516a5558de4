from stockflow.sources.base import AnnouncementSource
from stockflow.sources.nse import NSEAnnouncementSource, SessionState, SourceConfig

__all__ = [
    "AnnouncementSource",
    "NSEAnnouncementSource",
    "SessionState",
    "SourceConfig",
]
