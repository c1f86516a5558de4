"""Exception hierarchy for the alerting pipeline."""


class StockflowError(Exception):
    """Base class for all application errors."""


class ConfigurationError(StockflowError):
    """Required configuration is missing or invalid."""


class SourceError(StockflowError):
    """Announcement feed could not be read."""


class ExtractionError(StockflowError):
    """Attachment text could not be extracted."""


class SummarizationError(StockflowError):
    """AI provider failed to produce a usable summary."""


class DeliveryError(StockflowError):
    """A channel provider rejected or failed to send a message."""
