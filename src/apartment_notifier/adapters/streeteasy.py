"""StreetEasy source for NYC rental listings via the GraphQL search API."""

import logging
import uuid
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import FetchError
from ..models.listing import Listing
from . import register_source
from .base import BaseSource, SearchFilter

logger = logging.getLogger(__name__)

SEARCH_RENTALS_QUERY = """
  query GetListingRental($input: SearchRentalsInput!) {
    searchRentals(input: $input) {
      search {
        criteria
      }
      totalCount
      edges {
        ... on OrganicRentalEdge {
          node {
            id
            areaName
            bedroomCount
            buildingType
            fullBathroomCount
            geoPoint {
              latitude
              longitude
            }
            halfBathroomCount
            leadMedia {
              photo {
                  key
              }
            }
            price
            sourceGroupLabel
            status
            street
            unit
            urlPath
            tier
          }
        }
      }
    }
  }
"""


@register_source("streeteasy")
class StreetEasySource(BaseSource):
    """
    Source for StreetEasy rentals using the site's own GraphQL endpoint.

    The request mirrors what the search page sends from a browser. One call
    returns up to ``per_page`` results; there is no pagination.
    """

    API_URL = "https://api-v6.streeteasy.com/"
    TIMEOUT = 30

    APOLLO_CLIENT_NAME = "srp-frontend-service"
    APOLLO_CLIENT_VERSION = "version 28acce3818ba1c642a4e7f28710199fdbc967f37"
    USER_AGENT = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/142.0.0.0 Safari/537.36"
    )

    def __init__(self, search_filter: SearchFilter, session: Optional[requests.Session] = None):
        super().__init__(search_filter)
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": self.USER_AGENT,
            "Accept": "application/json",
            "Accept-Language": "en-US,en;q=0.9",
            "Origin": "https://streeteasy.com",
            "Referer": "https://streeteasy.com/",
            "apollographql-client-name": self.APOLLO_CLIENT_NAME,
            "apollographql-client-version": self.APOLLO_CLIENT_VERSION,
            "app-version": "1.0.0",
            "os": "web",
            "sec-ch-ua": '"Chromium";v="142", "Google Chrome";v="142", "Not_A Brand";v="99"',
            "sec-ch-ua-mobile": "?0",
            "sec-ch-ua-platform": '"macOS"',
            "Sec-Fetch-Site": "same-site",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Dest": "empty",
        }

    def build_request_body(self) -> Dict[str, Any]:
        """Build the GraphQL payload. Each call carries a fresh search token."""
        f = self.search_filter
        return {
            "query": SEARCH_RENTALS_QUERY,
            "variables": {
                "input": {
                    "filters": {
                        "rentalStatus": f.rental_status,
                        "areas": list(f.areas),
                        "price": {
                            "lowerBound": f.price_min,
                            "upperBound": f.price_max,
                        },
                        "boundingBox": {
                            "topLeft": {
                                "latitude": f.top_left.latitude,
                                "longitude": f.top_left.longitude,
                            },
                            "bottomRight": {
                                "latitude": f.bottom_right.latitude,
                                "longitude": f.bottom_right.longitude,
                            },
                        },
                    },
                    "page": 1,
                    "perPage": f.per_page,
                    "sorting": {
                        "attribute": "RECOMMENDED",
                        "direction": "DESCENDING",
                    },
                    "userSearchToken": str(uuid.uuid4()),
                    "adStrategy": "NONE",
                },
            },
        }

    def fetch(self) -> List[Listing]:
        """Fetch all active rentals matching the filter."""
        logger.debug(f"Requesting StreetEasy rentals from {self.API_URL}")

        try:
            response = self.session.post(
                self.API_URL,
                json=self.build_request_body(),
                headers=self._headers(),
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"failed to execute request: {e}") from e

        if response.status_code != 200:
            raise FetchError(f"API returned status {response.status_code}: {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"failed to parse response: {e}") from e

        return self._parse_payload(payload)

    def _parse_payload(self, payload: Any) -> List[Listing]:
        """Turn a decoded GraphQL response into Listings."""
        if not isinstance(payload, dict):
            raise FetchError("failed to parse response: expected a JSON object")

        errors = payload.get("errors") or []
        if errors:
            first = errors[0]
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise FetchError(f"GraphQL error: {message}")

        data = payload.get("data")
        if not data:
            raise FetchError("no data in response")

        if not isinstance(data, dict):
            raise FetchError("failed to parse response: data is not an object")

        results = data.get("searchRentals") or {}
        if not isinstance(results, dict):
            raise FetchError("failed to parse response: searchRentals is not an object")

        edges = results.get("edges") or []
        if not isinstance(edges, list):
            raise FetchError("failed to parse response: edges is not a list")

        total_count = results.get("totalCount")
        if total_count is not None and (isinstance(total_count, bool) or not isinstance(total_count, int)):
            raise FetchError("failed to parse response: totalCount is not an integer")

        listings = []
        for edge in edges:
            node = edge.get("node") if isinstance(edge, dict) else None
            if not node:
                continue
            try:
                listings.append(Listing.from_node(node))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise FetchError(f"failed to parse listing node: {e}") from e

        if total_count is not None and total_count >= self.search_filter.per_page:
            logger.warning(
                f"StreetEasy reported {total_count} results for a page size of "
                f"{self.search_filter.per_page}; some listings were not returned"
            )

        logger.info(f"Fetched {len(listings)} listings from StreetEasy")
        return listings
