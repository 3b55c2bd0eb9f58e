"""Poll cycle orchestration: fetch, deduplicate, notify, record, summarize."""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List

from ..adapters.base import BaseSource
from ..exceptions import FetchError, NotifyError, StoreError
from .deduplication import SeenStore
from .notifier import DiscordNotifier, SAMPLE_SIZE

logger = logging.getLogger(__name__)


@dataclass
class PollResult:
    """Outcome of one poll cycle."""

    total_count: int = 0
    new_ids: List[str] = field(default_factory=list)
    failures: int = 0
    fetch_failed: bool = False

    @property
    def new_count(self) -> int:
        return len(self.new_ids)


class Poller:
    """
    Drive poll cycles against a source, a seen-store and a notifier.

    Coordinates: fetching -> dedup check -> notification ->
                 recording -> status summary

    A fetch failure ends the cycle. Any other failure only skips the
    listing it happened on. Nothing is retried within a cycle.
    """

    RATE_LIMIT_DELAY = 0.5  # Seconds between Discord messages
    DEFAULT_INTERVAL = 30 * 60

    def __init__(
        self,
        source: BaseSource,
        store: SeenStore,
        notifier: DiscordNotifier,
        interval: float = DEFAULT_INTERVAL,
        rate_limit_delay: float = RATE_LIMIT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.source = source
        self.store = store
        self.notifier = notifier
        self.interval = interval
        self.rate_limit_delay = rate_limit_delay
        self._sleep = sleep

    def _report(self, message: str) -> None:
        logger.error(message)
        self.notifier.send_error(message)

    def run_cycle(self) -> PollResult:
        """
        Execute one poll cycle.

        Returns:
            PollResult describing what was fetched and sent
        """
        logger.info("Starting poll...")
        result = PollResult()

        try:
            listings = self.source.fetch()
        except FetchError as e:
            self._report(f"Failed to fetch listings: {e}")
            result.fetch_failed = True
            return result

        result.total_count = len(listings)
        logger.info(f"Fetched {len(listings)} total listings from {self.source.get_source_name()}")

        for listing in listings:
            try:
                if not self.store.is_new(listing.id):
                    continue
            except StoreError as e:
                self._report(f"Error checking listing {listing.id}: {e}")
                result.failures += 1
                continue

            try:
                self.notifier.send_listing(listing)
            except NotifyError as e:
                # Not marked seen, so the next poll tries again
                self._report(f"Error sending notification for {listing.id}: {e}")
                result.failures += 1
                continue

            try:
                self.store.mark_seen(listing)
            except StoreError as e:
                self._report(f"Error marking listing {listing.id} as seen: {e}")
                result.failures += 1
                continue

            logger.info(
                f"New listing: {listing.street}, {listing.unit} - "
                f"{listing.display_price()} ({listing.area_name})"
            )
            result.new_ids.append(listing.id)

            self._sleep(self.rate_limit_delay)

        logger.info(f"Poll complete. Found {result.new_count} new listings.")

        try:
            self.notifier.send_status(result.total_count, result.new_count, listings[:SAMPLE_SIZE])
        except NotifyError as e:
            self._report(f"Error sending status update: {e}")

        return result

    def _run_guarded(self) -> None:
        """Run a cycle without letting an unexpected error kill the scheduler."""
        try:
            self.run_cycle()
        except Exception as e:
            logger.exception(f"Unexpected error during poll: {e}")
            self.notifier.send_error(f"Unexpected error during poll: {e}")

    def run_forever(self, stop_event: threading.Event) -> None:
        """
        Poll immediately, then every ``interval`` seconds until stopped.

        Setting ``stop_event`` prevents further cycles; a cycle already in
        progress runs to completion.
        """
        logger.info("Running initial poll...")
        self._run_guarded()

        logger.info(f"Scheduler started. Polling every {self.interval / 60:g} minutes.")
        while not stop_event.wait(self.interval):
            self._run_guarded()

        logger.info("Scheduler stopped.")
