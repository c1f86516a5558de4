"""Base announcement source interface."""

from abc import ABC, abstractmethod

from stockflow.models import Announcement


class AnnouncementSource(ABC):
    """Abstract base class for announcement feeds."""

    @abstractmethod
    async def fetch(self) -> list[Announcement]:
        """Fetch the current batch of announcements.

        Returns:
            Announcements in feed order, empty on any failure
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get source identifier.

        Returns:
            Source name string
        """
