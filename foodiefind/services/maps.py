from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from foodiefind.app.domain.errors import ProcessingError
from foodiefind.app.infra.db.base import RestaurantRepository

from .errors import MapsProviderError, NetworkTimeoutError

logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
DETAIL_FIELDS = "name,formatted_address,formatted_phone_number,rating,price_level,website,geometry,photos"
MAX_PHOTOS = 3
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_ENRICH_DELAY_SECONDS = 1.0

_PRICE_LEVELS = {0: "$", 1: "$", 2: "$$", 3: "$$$", 4: "$$$$"}


def format_price_level(price_level: Any) -> str | None:
    """Map the Places 0-4 price level to the ``$``..``$$$$`` scale."""
    if isinstance(price_level, bool) or not isinstance(price_level, int):
        return None
    return _PRICE_LEVELS.get(price_level)


@dataclass
class PlaceDetails:
    place_id: str
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    rating: float | None = None
    price_range: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    photos: list[dict[str, str]] = field(default_factory=list)

    @property
    def google_maps_url(self) -> str:
        return f"https://maps.google.com/?place_id={self.place_id}"


class PlacesClient:
    """Google Places text search followed by a details lookup."""

    def __init__(
        self,
        api_key: str | None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_json(self, url: str, params: dict[str, str]) -> dict:
        params = {**params, "key": self.api_key or ""}
        try:
            if self._client is not None:
                response = self._client.get(url, params=params, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as error:
            raise NetworkTimeoutError(url, self.timeout) from error
        except httpx.HTTPStatusError as error:
            raise MapsProviderError(f"Places API HTTP {error.response.status_code}") from error
        except httpx.HTTPError as error:
            raise MapsProviderError(f"Places API request failed: {error}") from error
        except ValueError as error:
            raise MapsProviderError("Places API response is not JSON") from error

        if not isinstance(payload, dict):
            raise MapsProviderError("Places API response is not a JSON object")
        return payload

    def _photo_url(self, reference: str) -> str:
        return f"{PHOTO_URL}?maxwidth=400&photoreference={reference}&key={self.api_key}"

    def lookup(self, name: str, city: str | None) -> PlaceDetails | None:
        """Return place details for the best text-search match, or None when nothing matches."""
        if not self.api_key:
            logger.info("Google Maps API key not configured")
            return None

        query = " ".join(part for part in (name, city) if part)
        search = self._get_json(TEXT_SEARCH_URL, {"query": query, "type": "restaurant"})
        results = search.get("results") or []
        if not results:
            logger.info("No places found for: %s", query)
            return None

        place_id = results[0].get("place_id")
        if not place_id:
            return None

        details = self._get_json(DETAILS_URL, {"place_id": place_id, "fields": DETAIL_FIELDS}).get("result") or {}
        location = (details.get("geometry") or {}).get("location") or {}

        return PlaceDetails(
            place_id=place_id,
            name=details.get("name"),
            address=details.get("formatted_address"),
            phone=details.get("formatted_phone_number"),
            website=details.get("website"),
            rating=details.get("rating"),
            price_range=format_price_level(details.get("price_level")),
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            photos=[
                {"reference": photo["photo_reference"], "url": self._photo_url(photo["photo_reference"])}
                for photo in (details.get("photos") or [])[:MAX_PHOTOS]
                if photo.get("photo_reference")
            ],
        )


class MapsEnricher:
    """
    Batch pass that fills stored restaurants with Places data.

    Address, phone, website, rating, coordinates and the maps URL are overwritten
    with the provider values; the price range is kept when the provider has none.
    """

    def __init__(
        self,
        places: PlacesClient,
        restaurants: RestaurantRepository,
        delay_seconds: float = DEFAULT_ENRICH_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.places = places
        self.restaurants = restaurants
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def enrich_all(self) -> dict[str, int]:
        restaurants = self.restaurants.list_restaurants()
        logger.info("Enriching %d restaurants with Places data", len(restaurants))

        enhanced = 0
        failed = 0
        for index, restaurant in enumerate(restaurants):
            if index and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

            try:
                details = self.places.lookup(restaurant.name, restaurant.city)
                if details is None:
                    failed += 1
                    continue

                self.restaurants.update_restaurant(
                    restaurant.id,
                    {
                        "address": details.address,
                        "phone": details.phone,
                        "website": details.website,
                        "rating": details.rating,
                        "price_range": details.price_range or restaurant.price_range,
                        "latitude": details.latitude,
                        "longitude": details.longitude,
                        "google_maps_url": details.google_maps_url,
                    },
                )
                enhanced += 1
            except (MapsProviderError, NetworkTimeoutError, ProcessingError) as error:
                logger.warning("Enrichment failed for %s: %s", restaurant.name, error)
                failed += 1

        logger.info("Enrichment complete: enhanced=%d, failed=%d", enhanced, failed)
        return {"enhanced": enhanced, "failed": failed, "total": len(restaurants)}
