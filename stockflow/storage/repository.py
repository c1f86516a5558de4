"""Seen-set, watcher lookup and delivery audit persistence."""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from peewee import fn

from stockflow.models import DeliveryResult, Watcher
from stockflow.storage.database import AlertHistory, AlertStock, SentNews, User, database_proxy

T = TypeVar("T")


async def _in_thread(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a query in a worker thread on a connection closed afterwards."""

    def call() -> T:
        with database_proxy.connection_context():
            return func(*args, **kwargs)

    return await asyncio.to_thread(call)


class AlertRepository:
    """Async facade over the peewee models used by the pipeline.

    Every call runs the blocking query in a worker thread on a connection
    opened and closed for that call. Calls never raise: read failures
    return empty results, write failures return False. Callers treat the
    store as best-effort.
    """

    async def load_seen_ids(self) -> set[str]:
        """Load identifiers of announcements already processed.

        Returns:
            Set of sequence ids, empty if the read fails
        """
        try:
            seen = await _in_thread(self._load_seen_ids)
        except Exception as e:
            logger.error(f"Failed to load processed announcements: {e}")
            return set()

        logger.info(f"Loaded {len(seen)} previously processed announcements")
        return seen

    async def resolve_watchers(self, symbol: str) -> list[Watcher]:
        """Find verified users with an enabled subscription to a symbol.

        Args:
            symbol: Exchange symbol in any case

        Returns:
            Watchers for the symbol, empty if none or on failure
        """
        normalized = symbol.strip().upper()
        try:
            watchers = await _in_thread(self._resolve_watchers, normalized)
        except Exception as e:
            logger.error(f"Failed to get watchers for {normalized}: {e}")
            return []

        logger.debug(f"Found {len(watchers)} watchers for {normalized}")
        return watchers

    async def log_delivery(
        self,
        user_id: int,
        symbol: str,
        original_text: str,
        message: str,
        seq_id: str,
        result: DeliveryResult,
    ) -> bool:
        """Append one audit row for a delivery attempt.

        Returns:
            True if the row was written
        """
        try:
            await _in_thread(
                AlertHistory.create,
                user_id=user_id,
                stock_symbol=symbol.upper(),
                news_title=original_text,
                ai_summary=message,
                news_seq_id=seq_id,
                channel=result.channel,
                delivered=result.success,
                error=result.error,
            )
        except Exception as e:
            logger.error(f"Failed to log notification for user {user_id}: {e}")
            return False

        logger.debug(f"Logged notification for user {user_id} (delivered={result.success})")
        return True

    async def mark_processed(self, seq_id: str, symbol: str) -> bool:
        """Record an announcement in the seen-set.

        A duplicate mark is a no-op.

        Returns:
            True if the statement succeeded
        """
        try:
            await _in_thread(self._mark_processed, seq_id, symbol.upper())
        except Exception as e:
            logger.error(f"Failed to mark announcement {seq_id} as processed: {e}")
            return False

        logger.info(f"Marked announcement {seq_id} as processed")
        return True

    @staticmethod
    def _load_seen_ids() -> set[str]:
        return {row.news_seq_id for row in SentNews.select(SentNews.news_seq_id)}

    @staticmethod
    def _resolve_watchers(symbol: str) -> list[Watcher]:
        query = (
            User.select(
                User.id,
                User.phone_number,
                User.login_method,
                User.telegram_chat_id,
            )
            .join(AlertStock)
            .where(
                (fn.UPPER(AlertStock.stock_symbol) == symbol)
                & (AlertStock.is_enabled == True)  # noqa: E712
                & (User.is_verified == True)  # noqa: E712
            )
            .distinct()
            .order_by(User.id)
        )
        return [
            Watcher(
                user_id=user.id,
                symbol=symbol,
                channel=user.login_method,
                phone_number=user.phone_number,
                telegram_chat_id=user.telegram_chat_id,
            )
            for user in query
        ]

    @staticmethod
    def _mark_processed(seq_id: str, symbol: str) -> None:
        SentNews.insert(news_seq_id=seq_id, stock_symbol=symbol).on_conflict_ignore().execute()
