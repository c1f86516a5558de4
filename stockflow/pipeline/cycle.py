"""One end-to-end announcement check: fetch, dedupe, classify, compose, deliver, record."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol, TypedDict

from loguru import logger

from stockflow.ai.summarizer import Summarizer
from stockflow.delivery.router import DeliveryRouter
from stockflow.models import Announcement, DeliveryResult, Tier, Watcher
from stockflow.pipeline.classifier import classify
from stockflow.pipeline.composer import compose
from stockflow.pipeline.extractor import DocumentExtractor
from stockflow.sources.base import AnnouncementSource


class Repository(Protocol):
    """Persistence operations the cycle depends on."""

    async def load_seen_ids(self) -> set[str]: ...

    async def resolve_watchers(self, symbol: str) -> list[Watcher]: ...

    async def log_delivery(
        self,
        user_id: int,
        symbol: str,
        original_text: str,
        message: str,
        seq_id: str,
        result: DeliveryResult,
    ) -> bool: ...

    async def mark_processed(self, seq_id: str, symbol: str) -> bool: ...


@dataclass
class CycleDependencies:
    """Collaborators of one cycle, passed explicitly so tests can swap fakes."""

    source: AnnouncementSource
    repository: Repository
    router: DeliveryRouter
    summarizer: Summarizer | None = None
    extractor: DocumentExtractor | None = None
    clock: Callable[[], datetime] = datetime.now


@dataclass
class AnnouncementOutcome:
    """What happened to one announcement."""

    seq_id: str
    symbol: str
    tier: Tier
    watchers: int = 0
    delivered: int = 0
    failed: int = 0
    marked: bool = False
    results: list[DeliveryResult] = field(default_factory=list)


class CycleResult(TypedDict):
    """Summary of one cycle."""

    success: bool
    fetched_count: int
    new_count: int
    processed_count: int
    delivered_count: int
    failed_count: int
    error: str | None


OutcomeCallback = Callable[[AnnouncementOutcome], Awaitable[None]]


async def process_announcement(
    announcement: Announcement, deps: CycleDependencies
) -> AnnouncementOutcome:
    """Classify, compose and deliver one announcement, then mark it processed.

    Every watcher gets an attempt and an audit row before the announcement is
    marked, so a crash part-way leaves it eligible for the next cycle.

    Args:
        announcement: New announcement
        deps: Cycle collaborators

    Returns:
        AnnouncementOutcome with delivery counts
    """
    tier = classify(announcement.description)
    symbol = announcement.symbol.upper()
    outcome = AnnouncementOutcome(seq_id=announcement.seq_id, symbol=symbol, tier=tier)

    if not symbol:
        logger.warning(f"Skipping announcement {announcement.seq_id} without symbol")
        outcome.marked = await deps.repository.mark_processed(announcement.seq_id, symbol)
        return outcome

    logger.info(f"Processing {tier.value} announcement for {symbol}: {announcement.description}")

    watchers = await deps.repository.resolve_watchers(symbol)
    outcome.watchers = len(watchers)

    if not watchers:
        logger.info(f"No watchers for {symbol}, skipping delivery")
        outcome.marked = await deps.repository.mark_processed(announcement.seq_id, symbol)
        return outcome

    message = await compose(
        replace(announcement, symbol=symbol),
        tier,
        summarizer=deps.summarizer,
        extractor=deps.extractor,
        today=deps.clock().date(),
    )

    for watcher in watchers:
        result = await deps.router.deliver(watcher, symbol, message)
        outcome.results.append(result)
        if result.success:
            outcome.delivered += 1
        else:
            outcome.failed += 1

        await deps.repository.log_delivery(
            watcher.user_id,
            symbol,
            announcement.description,
            message,
            announcement.seq_id,
            result,
        )

    outcome.marked = await deps.repository.mark_processed(announcement.seq_id, symbol)
    logger.info(
        f"{symbol} [{announcement.seq_id}]: delivered {outcome.delivered}/{len(watchers)}"
    )
    return outcome


def select_new(announcements: list[Announcement], seen: set[str]) -> list[Announcement]:
    """Keep unseen announcements in feed order, dropping repeats within the batch."""
    new: list[Announcement] = []
    batch_ids: set[str] = set()
    for announcement in announcements:
        if announcement.seq_id in seen or announcement.seq_id in batch_ids:
            continue
        batch_ids.add(announcement.seq_id)
        new.append(announcement)
    return new


async def run_cycle(
    deps: CycleDependencies, on_outcome: OutcomeCallback | None = None
) -> CycleResult:
    """Run one full announcement check.

    The seen-set is reloaded from storage on every call. Announcements and
    their watchers are handled sequentially. Never raises.

    Args:
        deps: Cycle collaborators
        on_outcome: Awaited after each processed announcement

    Returns:
        CycleResult summary
    """
    logger.info("Checking for new announcements...")

    fetched: list[Announcement] = []
    new: list[Announcement] = []
    processed = delivered = failed = 0

    try:
        seen = await deps.repository.load_seen_ids()
        fetched = await deps.source.fetch()
        new = select_new(fetched, seen)

        if not new:
            logger.info("No new announcements found")
        else:
            logger.info(f"Found {len(new)} new announcements")

        for announcement in new:
            try:
                outcome = await process_announcement(announcement, deps)
            except Exception:
                logger.exception(f"Failed to process announcement {announcement.seq_id}")
                failed += 1
                continue

            processed += 1
            delivered += outcome.delivered
            failed += outcome.failed

            if on_outcome is not None:
                try:
                    await on_outcome(outcome)
                except Exception as e:
                    logger.error(f"Outcome callback failed for {announcement.seq_id}: {e}")

    except Exception as e:
        logger.exception("Announcement check failed")
        return CycleResult(
            success=False,
            fetched_count=len(fetched),
            new_count=len(new),
            processed_count=processed,
            delivered_count=delivered,
            failed_count=failed,
            error=str(e),
        )

    return CycleResult(
        success=True,
        fetched_count=len(fetched),
        new_count=len(new),
        processed_count=processed,
        delivered_count=delivered,
        failed_count=failed,
        error=None,
    )
