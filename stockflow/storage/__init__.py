from stockflow.storage.database import (
    AlertHistory,
    AlertStock,
    SentNews,
    User,
    close_database,
    database_proxy,
    init_database,
)
from stockflow.storage.repository import AlertRepository

__all__ = [
    "AlertHistory",
    "AlertRepository",
    "AlertStock",
    "SentNews",
    "User",
    "close_database",
    "database_proxy",
    "init_database",
]
