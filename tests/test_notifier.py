"""Tests for Discord webhook notifications."""

from unittest.mock import MagicMock

import pytest
import requests

from apartment_notifier.exceptions import NotifyError
from apartment_notifier.services.notifier import (
    ERROR_COLOR,
    LISTING_COLOR,
    NO_LISTINGS_TEXT,
    STATUS_COLOR,
    DisabledWebhook,
    DiscordNotifier,
    Webhook,
    build_listing_embed,
    build_status_embed,
    format_sample,
    make_webhook,
)


@pytest.fixture
def session(make_response):
    fake = MagicMock()
    fake.post.return_value = make_response(status_code=204)
    return fake


def _posted_embed(session, call_index=0):
    _, kwargs = session.post.call_args_list[call_index]
    embeds = kwargs["json"]["embeds"]
    assert len(embeds) == 1
    return embeds[0]


class TestWebhook:
    """Tests for Webhook delivery."""

    @pytest.mark.parametrize("status", [200, 204])
    def test_success_statuses(self, session, make_response, status):
        session.post.return_value = make_response(status_code=status)
        Webhook("https://discord.test/hook", session=session).post({"title": "x"})

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://discord.test/hook"
        assert kwargs["json"] == {"embeds": [{"title": "x"}]}
        assert kwargs["timeout"] == Webhook.TIMEOUT

    @pytest.mark.parametrize("status", [400, 429, 500])
    def test_bad_status_raises(self, session, make_response, status):
        session.post.return_value = make_response(status_code=status)
        with pytest.raises(NotifyError, match=str(status)):
            Webhook("https://discord.test/hook", session=session).post({})

    def test_transport_error_raises(self, session):
        session.post.side_effect = requests.exceptions.ConnectionError("boom")
        with pytest.raises(NotifyError, match="boom"):
            Webhook("https://discord.test/hook", session=session).post({})

    def test_make_webhook_unset(self):
        assert isinstance(make_webhook(None), DisabledWebhook)
        assert isinstance(make_webhook(""), DisabledWebhook)
        assert make_webhook("").enabled is False

    def test_make_webhook_set(self, session):
        hook = make_webhook("https://discord.test/hook", session=session)
        assert isinstance(hook, Webhook)
        assert hook.enabled is True


class TestListingEmbed:
    """Tests for the per-listing embed."""

    def test_full_listing(self, sample_listing):
        embed = build_listing_embed(sample_listing)

        assert embed["title"] == "West Village"
        assert embed["description"] == "123 Bleecker St, Unit 3F"
        assert embed["url"] == "https://streeteasy.com/building/123-bleecker-street-new_york/3f"
        assert embed["color"] == LISTING_COLOR
        assert embed["fields"] == [
            {"name": "Price", "value": "$2650/mo", "inline": True},
            {"name": "Type", "value": "1 Bed", "inline": True},
            {"name": "Bath", "value": "1.5 Baths", "inline": True},
            {"name": "Broker", "value": "Corcoran", "inline": False},
        ]
        assert embed["thumbnail"] == {"url": sample_listing.photo_url}

    def test_no_broker_no_photo(self, make_listing):
        embed = build_listing_embed(make_listing("1", unit="", bedroom_count=0))

        assert [f["name"] for f in embed["fields"]] == ["Price", "Type", "Bath"]
        assert embed["fields"][1]["value"] == "Studio"
        assert "thumbnail" not in embed
        assert embed["description"] == "1 E 7th St"


class TestStatusEmbed:
    """Tests for the poll summary."""

    def test_format_sample_limits_to_three(self, make_listing):
        listings = [make_listing(str(i), area=f"Area {i}", price=2000 + i) for i in range(5)]
        text = format_sample(listings)

        assert text.splitlines() == [
            "• Area 0 - 0 E 7th St, $2000/mo",
            "• Area 1 - 1 E 7th St, $2001/mo",
            "• Area 2 - 2 E 7th St, $2002/mo",
        ]

    def test_format_sample_empty(self):
        assert format_sample([]) == NO_LISTINGS_TEXT

    def test_status_embed(self, make_listing):
        embed = build_status_embed(12, 2, [make_listing("a")])

        assert embed["title"] == "Poll Complete"
        assert embed["color"] == STATUS_COLOR
        assert embed["fields"][0] == {"name": "Total Listings", "value": "12", "inline": True}
        assert embed["fields"][1] == {"name": "New Listings", "value": "2", "inline": True}
        assert embed["fields"][2]["name"] == "Sample from Response"
        assert embed["fields"][2]["inline"] is False
        assert "timestamp" in embed


class TestDiscordNotifier:
    """Tests for DiscordNotifier channels."""

    def test_send_listing(self, session, sample_listing):
        notifier = DiscordNotifier.from_urls("https://discord.test/main", session=session)
        notifier.send_listing(sample_listing)

        assert session.post.call_count == 1
        assert session.post.call_args[0][0] == "https://discord.test/main"
        assert _posted_embed(session)["title"] == "West Village"

    def test_send_listing_failure_raises(self, session, make_response, sample_listing):
        session.post.return_value = make_response(status_code=500)
        notifier = DiscordNotifier.from_urls("https://discord.test/main", session=session)

        with pytest.raises(NotifyError):
            notifier.send_listing(sample_listing)

    def test_status_unconfigured_is_noop(self, session):
        notifier = DiscordNotifier.from_urls("https://discord.test/main", session=session)
        notifier.send_status(3, 1, [])
        session.post.assert_not_called()

    def test_send_status(self, session):
        notifier = DiscordNotifier.from_urls(
            "https://discord.test/main",
            status_webhook_url="https://discord.test/status",
            session=session,
        )
        notifier.send_status(0, 0, [])

        assert session.post.call_args[0][0] == "https://discord.test/status"
        embed = _posted_embed(session)
        assert embed["fields"][2]["value"] == NO_LISTINGS_TEXT

    def test_error_unconfigured_is_noop(self, session):
        notifier = DiscordNotifier.from_urls("https://discord.test/main", session=session)
        notifier.send_error("something broke")
        session.post.assert_not_called()

    def test_send_error(self, session):
        notifier = DiscordNotifier.from_urls(
            "https://discord.test/main",
            error_webhook_url="https://discord.test/errors",
            session=session,
        )
        notifier.send_error("something broke")

        assert session.post.call_args[0][0] == "https://discord.test/errors"
        embed = _posted_embed(session)
        assert embed["title"] == "Error"
        assert embed["description"] == "something broke"
        assert embed["color"] == ERROR_COLOR

    @pytest.mark.parametrize(
        "failure",
        [requests.exceptions.Timeout("slow"), None],
    )
    def test_send_error_never_raises(self, session, make_response, failure):
        if failure is not None:
            session.post.side_effect = failure
        else:
            session.post.return_value = make_response(status_code=500)
        notifier = DiscordNotifier.from_urls(
            "https://discord.test/main",
            error_webhook_url="https://discord.test/errors",
            session=session,
        )

        notifier.send_error("something broke")  # Should not raise

    def test_send_test(self, session):
        notifier = DiscordNotifier.from_urls("https://discord.test/main", session=session)
        notifier.send_test()

        assert _posted_embed(session)["title"] == "Apartment Notifier - Test"
