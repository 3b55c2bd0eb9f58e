"""Discord webhook notifications for listings, poll summaries and errors."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..exceptions import NotifyError
from ..models.listing import Listing

logger = logging.getLogger(__name__)

LISTING_COLOR = 5814783  # Light blue
ERROR_COLOR = 15158332  # Red
STATUS_COLOR = 3066993  # Green

SAMPLE_SIZE = 3
NO_LISTINGS_TEXT = "No listings in response"


class Webhook:
    """A configured Discord webhook endpoint."""

    SUCCESS_STATUSES = (200, 204)
    TIMEOUT = 10

    def __init__(self, url: str, session: Optional[requests.Session] = None):
        self.url = url
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return True

    def post(self, embed: Dict[str, Any]) -> None:
        """
        Deliver a single embed.

        Raises:
            NotifyError: On transport failure or an unexpected status
        """
        try:
            response = self.session.post(
                self.url,
                json={"embeds": [embed]},
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise NotifyError(f"failed to send webhook: {e}") from e

        if response.status_code not in self.SUCCESS_STATUSES:
            raise NotifyError(f"discord returned status {response.status_code}")


class DisabledWebhook:
    """Stand-in for an unconfigured optional channel. Drops every message."""

    @property
    def enabled(self) -> bool:
        return False

    def post(self, embed: Dict[str, Any]) -> None:
        return None


def make_webhook(url: Optional[str], session: Optional[requests.Session] = None):
    """Return a Webhook for ``url``, or a DisabledWebhook when it is unset."""
    if not url:
        return DisabledWebhook()
    return Webhook(url, session=session)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_listing_embed(listing: Listing) -> Dict[str, Any]:
    """Construct the Discord embed for a single listing."""
    fields: List[Dict[str, Any]] = [
        {"name": "Price", "value": listing.display_price(), "inline": True},
        {"name": "Type", "value": listing.display_bedrooms(), "inline": True},
        {"name": "Bath", "value": listing.display_bathrooms(), "inline": True},
    ]

    if listing.source_group_label:
        fields.append({"name": "Broker", "value": listing.source_group_label, "inline": False})

    # Neighborhood first, it decides whether the listing is worth a look
    embed: Dict[str, Any] = {
        "title": listing.area_name,
        "url": listing.url,
        "description": listing.address,
        "color": LISTING_COLOR,
        "fields": fields,
    }

    if listing.photo_url:
        embed["thumbnail"] = {"url": listing.photo_url}

    return embed


def format_sample(listings: Sequence[Listing]) -> str:
    """Render up to three listings as bullet lines for the status message."""
    lines = [
        f"• {listing.area_name} - {listing.street}, {listing.display_price()}"
        for listing in listings[:SAMPLE_SIZE]
    ]
    if not lines:
        return NO_LISTINGS_TEXT
    return "\n".join(lines)


def build_status_embed(total_count: int, new_count: int, sample_listings: Sequence[Listing]) -> Dict[str, Any]:
    return {
        "title": "Poll Complete",
        "color": STATUS_COLOR,
        "fields": [
            {"name": "Total Listings", "value": str(total_count), "inline": True},
            {"name": "New Listings", "value": str(new_count), "inline": True},
            {"name": "Sample from Response", "value": format_sample(sample_listings), "inline": False},
        ],
        "timestamp": _timestamp(),
    }


class DiscordNotifier:
    """
    Send poll results to Discord webhooks.

    Channels:
    - primary: one message per new listing (required)
    - status: one summary per poll cycle (optional)
    - error: free-text failure notices (optional, best effort)
    """

    def __init__(self, webhook, error_webhook=None, status_webhook=None):
        self.webhook = webhook
        self.error_webhook = error_webhook or DisabledWebhook()
        self.status_webhook = status_webhook or DisabledWebhook()

    @classmethod
    def from_urls(
        cls,
        webhook_url: str,
        error_webhook_url: Optional[str] = None,
        status_webhook_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> "DiscordNotifier":
        session = session or requests.Session()
        return cls(
            Webhook(webhook_url, session=session),
            error_webhook=make_webhook(error_webhook_url, session=session),
            status_webhook=make_webhook(status_webhook_url, session=session),
        )

    def send_listing(self, listing: Listing) -> None:
        """Post one listing to the primary channel. Raises NotifyError."""
        self.webhook.post(build_listing_embed(listing))
        logger.debug(f"Sent notification for listing {listing.id}")

    def send_status(self, total_count: int, new_count: int, sample_listings: Sequence[Listing]) -> None:
        """Post the poll summary to the status channel, if configured."""
        self.status_webhook.post(build_status_embed(total_count, new_count, sample_listings))

    def send_error(self, message: str) -> None:
        """Post an error notice. Never raises."""
        embed = {
            "title": "Error",
            "description": message,
            "color": ERROR_COLOR,
            "timestamp": _timestamp(),
        }
        try:
            self.error_webhook.post(embed)
        except Exception as e:
            logger.warning(f"Failed to deliver error notification: {e}")

    def send_test(self) -> None:
        """Post a connectivity check to the primary channel."""
        self.webhook.post({
            "title": "Apartment Notifier - Test",
            "description": "Your webhook configuration is working correctly!",
            "color": LISTING_COLOR,
            "timestamp": _timestamp(),
        })
