"""Entry point: wire the components together and run the poll scheduler."""

import argparse
import logging
import signal
import sys
import threading

from .adapters import get_source
from .config import Config, load_config
from .exceptions import ConfigError, NotifyError, StoreError
from .services.deduplication import SeenStore
from .services.notifier import DiscordNotifier
from .services.poller import Poller
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_poller(config: Config, store: SeenStore) -> Poller:
    """Construct the source and notifier for ``config`` around an open store."""
    source = get_source("streeteasy", config.search_filter)
    notifier = DiscordNotifier.from_urls(
        config.webhook_url,
        error_webhook_url=config.error_webhook_url,
        status_webhook_url=config.status_webhook_url,
    )
    return Poller(source, store, notifier, interval=config.poll_interval_seconds)


def install_signal_handlers(stop_event: threading.Event) -> None:
    """Set ``stop_event`` on SIGINT or SIGTERM."""

    def _handle(signum, frame):
        logger.info(f"Received signal {signal.Signals(signum).name}, shutting down...")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Apartment Notifier - Post new StreetEasy rentals to Discord"
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a YAML file overriding the search filter",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single poll and exit",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show database statistics and exit",
    )
    parser.add_argument(
        "--test-notify",
        action="store_true",
        help="Send a test message to the primary webhook and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else None)
    logger.info("Apartment Notifier starting...")

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        sys.exit(1)
    logger.info(f"Config loaded. Database path: {config.database_path}")

    # Handle --test-notify
    if args.test_notify:
        notifier = DiscordNotifier.from_urls(config.webhook_url)
        try:
            notifier.send_test()
        except NotifyError as e:
            print(f"Failed to send test message: {e}")
            sys.exit(1)
        print("Test message sent")
        return

    try:
        store = SeenStore(config.database_path)
    except StoreError as e:
        logger.error(f"Failed to initialize storage: {e}")
        sys.exit(1)

    with store:
        logger.info("Database initialized")

        # Handle --stats
        if args.stats:
            try:
                stats = store.get_stats()
            except StoreError as e:
                logger.error(f"Failed to read statistics: {e}")
                sys.exit(1)
            print("\n=== Apartment Notifier Statistics ===")
            print(f"Total notified: {stats['total_seen']}")
            print(f"Most recent: {stats['last_seen_at'] or 'never'}")
            return

        poller = build_poller(config, store)

        if args.once:
            result = poller.run_cycle()
            if result.fetch_failed:
                sys.exit(1)
            return

        stop_event = threading.Event()
        install_signal_handlers(stop_event)
        poller.run_forever(stop_event)

    logger.info("Goodbye!")


if __name__ == "__main__":
    main()
