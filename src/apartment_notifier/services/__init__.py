from .deduplication import SeenStore
from .notifier import DiscordNotifier, DisabledWebhook, Webhook, make_webhook
from .poller import Poller, PollResult

__all__ = [
    "SeenStore",
    "DiscordNotifier",
    "DisabledWebhook",
    "Webhook",
    "make_webhook",
    "Poller",
    "PollResult",
]
