"""
Apartment Notifier - StreetEasy rental alerts delivered to Discord.

Polls the StreetEasy rental search on a fixed interval, remembers which
listings were already reported in SQLite, and posts each new one to a
Discord webhook.
"""

__version__ = "0.1.0"
