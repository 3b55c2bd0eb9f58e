"""Abstract base for listing sources and the search filter they run."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Tuple

from ..models.listing import Listing

DEFAULT_AREAS: Tuple[int, ...] = (
    101, 103, 104, 105, 106, 107, 108, 109, 110, 112, 113, 115, 116, 117,
    120, 122, 130, 131, 132, 133, 136, 141, 146, 152, 157, 158, 162, 478,
)


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SearchFilter:
    """
    Fixed search parameters for one source query.

    Defaults cover lower Manhattan rentals between $2,000 and $2,750.
    """

    price_min: int = 2000
    price_max: int = 2750
    areas: Tuple[int, ...] = DEFAULT_AREAS
    top_left: GeoPoint = field(default_factory=lambda: GeoPoint(40.774, -74.036))
    bottom_right: GeoPoint = field(default_factory=lambda: GeoPoint(40.698, -73.926))
    per_page: int = 500  # Results beyond this are silently dropped
    rental_status: str = "ACTIVE"

    def validate(self) -> None:
        """Raise ValueError if the filter is inconsistent."""
        if self.price_min < 0 or self.price_max < self.price_min:
            raise ValueError(
                f"Invalid price band: {self.price_min}-{self.price_max}"
            )
        if self.per_page <= 0:
            raise ValueError(f"per_page must be positive, got {self.per_page}")
        if not self.areas:
            raise ValueError("At least one area must be configured")


class BaseSource(ABC):
    """
    Abstract base class for listing sources.

    Each source must implement:
    - fetch(): Retrieve the full result set for its filter as Listings

    A source raises FetchError for every failure mode so the caller can
    abort the cycle without inspecting the cause.
    """

    def __init__(self, search_filter: SearchFilter):
        self.search_filter = search_filter
        self.source_name: str = self.__class__.__name__.replace("Source", "").lower()

    @abstractmethod
    def fetch(self) -> List[Listing]:
        """
        Fetch all active listings matching the filter.

        Returns:
            Listings in the order the source returned them

        Raises:
            FetchError: On any transport, status or payload problem
        """
        pass

    def get_source_name(self) -> str:
        """Get the name of this source."""
        return self.source_name
