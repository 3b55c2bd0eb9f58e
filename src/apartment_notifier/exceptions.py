"""Exception hierarchy for the apartment notifier."""


class ApartmentNotifierError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(ApartmentNotifierError):
    """Startup configuration is missing or invalid. Fatal."""


class FetchError(ApartmentNotifierError):
    """Listings could not be fetched. Aborts the current poll cycle."""


class StoreError(ApartmentNotifierError):
    """The seen-listings database failed. Skips the affected listing."""


class NotifyError(ApartmentNotifierError):
    """A webhook message could not be delivered."""
