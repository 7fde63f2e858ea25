from __future__ import annotations

import httpx
import pytest

from foodiefind.app.domain.models import Restaurant
from foodiefind.services.errors import MapsProviderError, NetworkTimeoutError
from foodiefind.services.maps import MapsEnricher, PlacesClient, format_price_level
from tests.unit.fakes import InMemoryRestaurantRepository


SEARCH_RESULT = {"results": [{"place_id": "place-1", "name": "Franklin Barbecue"}], "status": "OK"}
DETAILS_RESULT = {
    "result": {
        "name": "Franklin Barbecue",
        "formatted_address": "900 E 11th St, Austin, TX 78702",
        "formatted_phone_number": "(512) 653-1187",
        "website": "https://franklinbbq.com",
        "rating": 4.7,
        "price_level": 2,
        "geometry": {"location": {"lat": 30.2701, "lng": -97.7313}},
        "photos": [{"photo_reference": f"ref-{index}"} for index in range(5)],
    },
    "status": "OK",
}


def places_client(handler) -> PlacesClient:
    return PlacesClient("maps-key", client=httpx.Client(transport=httpx.MockTransport(handler)))


def places_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/textsearch/json"):
        if "Nowhere" in request.url.params["query"]:
            return httpx.Response(200, json={"results": [], "status": "ZERO_RESULTS"})
        return httpx.Response(200, json=SEARCH_RESULT)
    return httpx.Response(200, json=DETAILS_RESULT)


class TestFormatPriceLevel:
    def test_levels(self) -> None:
        assert format_price_level(0) == "$"
        assert format_price_level(1) == "$"
        assert format_price_level(2) == "$$"
        assert format_price_level(4) == "$$$$"

    def test_unknown(self) -> None:
        assert format_price_level(None) is None
        assert format_price_level(7) is None
        assert format_price_level("2") is None


class TestPlacesClient:
    def test_lookup_maps_details(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return places_handler(request)

        details = places_client(handler).lookup("Franklin Barbecue", "Austin, TX")

        assert details is not None
        assert details.address == "900 E 11th St, Austin, TX 78702"
        assert details.price_range == "$$"
        assert details.latitude == 30.2701
        assert details.google_maps_url == "https://maps.google.com/?place_id=place-1"
        assert len(details.photos) == 3
        assert seen[0].url.params["query"] == "Franklin Barbecue Austin, TX"
        assert seen[0].url.params["key"] == "maps-key"
        assert seen[1].url.params["place_id"] == "place-1"

    def test_no_results(self) -> None:
        assert places_client(places_handler).lookup("Nowhere Diner", None) is None

    def test_without_key_returns_none(self) -> None:
        client = PlacesClient(None)

        assert client.configured is False
        assert client.lookup("Franklin Barbecue", "Austin") is None

    def test_http_error(self) -> None:
        with pytest.raises(MapsProviderError):
            places_client(lambda request: httpx.Response(500)).lookup("Franklin Barbecue", None)

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(NetworkTimeoutError):
            places_client(handler).lookup("Franklin Barbecue", None)


class TestMapsEnricher:
    def test_enriches_and_counts(self) -> None:
        repo = InMemoryRestaurantRepository(
            [
                Restaurant(id="r1", name="Franklin Barbecue", city="Austin, TX", price_range="$$$"),
                Restaurant(id="r2", name="Nowhere Diner"),
                Restaurant(id="r3", name="Franklin Barbecue Two", price_range="$"),
            ]
        )
        sleeps: list[float] = []
        enricher = MapsEnricher(places_client(places_handler), repo, delay_seconds=1.0, sleep=sleeps.append)

        result = enricher.enrich_all()

        assert result == {"enhanced": 2, "failed": 1, "total": 3}
        assert sleeps == [1.0, 1.0]
        franklin = repo.get_restaurant("r1")
        assert franklin.phone == "(512) 653-1187"
        assert franklin.price_range == "$$"
        assert franklin.google_maps_url == "https://maps.google.com/?place_id=place-1"
        assert repo.get_restaurant("r2").address is None

    def test_keeps_price_range_when_provider_has_none(self) -> None:
        details_without_price = {"result": {**DETAILS_RESULT["result"], "price_level": None}}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/textsearch/json"):
                return httpx.Response(200, json=SEARCH_RESULT)
            return httpx.Response(200, json=details_without_price)

        repo = InMemoryRestaurantRepository([Restaurant(id="r1", name="Franklin Barbecue", price_range="$$$")])

        MapsEnricher(places_client(handler), repo, sleep=lambda _: None).enrich_all()

        assert repo.get_restaurant("r1").price_range == "$$$"

    def test_provider_errors_count_as_failed(self) -> None:
        repo = InMemoryRestaurantRepository([Restaurant(id="r1", name="Franklin Barbecue")])
        enricher = MapsEnricher(
            places_client(lambda request: httpx.Response(503)),
            repo,
            sleep=lambda _: None,
        )

        assert enricher.enrich_all() == {"enhanced": 0, "failed": 1, "total": 1}
