"""Normalized listing model and its display helpers."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

STREETEASY_BASE_URL = "https://streeteasy.com"
PHOTO_URL_TEMPLATE = "https://photos.zillowstatic.com/fp/{key}-se_extra_large_1500_800.webp"


@dataclass(frozen=True)
class Listing:
    """
    One rental unit observed in a search response.

    Built fresh from the API payload on every poll and never mutated.
    Only the id (plus a few display fields) is persisted once notified.
    """

    # Identification
    id: str

    # Location
    area_name: str
    street: str
    unit: str = ""

    # Economics
    price: int = 0  # Whole dollars per month
    bedroom_count: int = 0  # 0 = studio
    full_bathroom_count: int = 0
    half_bathroom_count: int = 0

    # Presentation
    url_path: str = ""
    source_group_label: str = ""  # Broker, may be empty
    photo_key: str = ""

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "Listing":
        """Build a Listing from a search result ``node`` object."""
        photo_key = ""
        lead_media = node.get("leadMedia") or {}
        photo = lead_media.get("photo") or {}
        if photo.get("key"):
            photo_key = photo["key"]

        return cls(
            id=str(node["id"]),
            area_name=node.get("areaName") or "",
            street=node.get("street") or "",
            unit=node.get("unit") or "",
            price=int(node.get("price") or 0),
            bedroom_count=int(node.get("bedroomCount") or 0),
            full_bathroom_count=int(node.get("fullBathroomCount") or 0),
            half_bathroom_count=int(node.get("halfBathroomCount") or 0),
            url_path=node.get("urlPath") or "",
            source_group_label=node.get("sourceGroupLabel") or "",
            photo_key=photo_key,
        )

    @property
    def address(self) -> str:
        """Street address, with the unit appended when there is one."""
        if self.unit:
            return f"{self.street}, Unit {self.unit}"
        return self.street

    @property
    def url(self) -> str:
        return f"{STREETEASY_BASE_URL}{self.url_path}"

    @property
    def photo_url(self) -> Optional[str]:
        if not self.photo_key:
            return None
        return PHOTO_URL_TEMPLATE.format(key=self.photo_key)

    @property
    def total_bathrooms(self) -> float:
        return self.full_bathroom_count + 0.5 * self.half_bathroom_count

    def display_price(self) -> str:
        return f"${self.price}/mo"

    def display_bedrooms(self) -> str:
        """Format bedroom count: Studio, 1 Bed, N Beds."""
        if self.bedroom_count <= 0:
            return "Studio"
        if self.bedroom_count == 1:
            return "1 Bed"
        return f"{self.bedroom_count} Beds"

    def display_bathrooms(self) -> str:
        """Format bathrooms, counting half baths as 0.5 (e.g. 1.5 Baths)."""
        total = self.total_bathrooms
        if total == 1:
            return "1 Bath"
        if total == int(total):
            return f"{total:.0f} Baths"
        return f"{total:.1f} Baths"

    def __repr__(self) -> str:
        return f"Listing({self.id}, {self.area_name}, {self.display_price()})"
