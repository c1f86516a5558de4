"""peewee models and database lifecycle."""

from datetime import datetime
from pathlib import Path

import peewee
from loguru import logger
from playhouse.db_url import connect

database_proxy = peewee.DatabaseProxy()


class BaseModel(peewee.Model):
    """Base model bound to the configured database."""

    class Meta:
        database = database_proxy


class User(BaseModel):
    """Account row, owned by the account subsystem."""

    phone_number = peewee.CharField(null=True)
    telegram_chat_id = peewee.CharField(null=True)
    login_method = peewee.CharField(null=True)
    is_verified = peewee.BooleanField(default=False)
    created_at = peewee.DateTimeField(default=datetime.now)

    class Meta:
        table_name = "users"


class AlertStock(BaseModel):
    """A user's subscription to a stock symbol."""

    user = peewee.ForeignKeyField(User, backref="alert_stocks", column_name="user_id")
    stock_symbol = peewee.CharField()
    stock_name = peewee.CharField(null=True)
    is_enabled = peewee.BooleanField(default=True)
    added_at = peewee.DateTimeField(default=datetime.now)

    class Meta:
        table_name = "alert_stocks"
        indexes = ((("user", "stock_symbol"), True),)


class AlertHistory(BaseModel):
    """Append-only audit row, one per delivery attempt."""

    user_id = peewee.IntegerField()
    stock_symbol = peewee.CharField()
    news_title = peewee.TextField(null=True)
    ai_summary = peewee.TextField(null=True)
    news_seq_id = peewee.CharField(null=True)
    channel = peewee.CharField(null=True)
    delivered = peewee.BooleanField(default=False)
    error = peewee.TextField(null=True)
    sent_at = peewee.DateTimeField(default=datetime.now)

    class Meta:
        table_name = "alert_history"


class SentNews(BaseModel):
    """Seen-set entry: an announcement that finished processing."""

    news_seq_id = peewee.CharField(unique=True)
    stock_symbol = peewee.CharField(null=True)
    processed_at = peewee.DateTimeField(default=datetime.now)

    class Meta:
        table_name = "sent_news"


MODELS: list[type[BaseModel]] = [User, AlertStock, AlertHistory, SentNews]


def init_database(url: str, create_tables: bool = True) -> peewee.Database:
    """Connect the model proxy to a database URL.

    Args:
        url: peewee database URL, e.g. ``sqlite:///data/stockflow.db``
        create_tables: Create missing tables

    Returns:
        The connected database
    """
    if url.startswith("sqlite:///") and ":memory:" not in url:
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)

    db = connect(url)
    database_proxy.initialize(db)

    if create_tables:
        db.create_tables(MODELS, safe=True)
        logger.info(f"Database tables ready ({len(MODELS)} models)")

    return db


def close_database() -> None:
    """Close the current connection if one is open."""
    if database_proxy.obj is not None and not database_proxy.is_closed():
        database_proxy.close()
