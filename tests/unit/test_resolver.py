from __future__ import annotations

from foodiefind.app.domain.models import RecommendationCandidate, Restaurant
from foodiefind.services.resolver import RestaurantResolver
from tests.unit.fakes import InMemoryRestaurantRepository


class TestRestaurantResolver:
    def test_creates_when_no_match(self) -> None:
        repo = InMemoryRestaurantRepository()
        resolver = RestaurantResolver(repo)
        candidate = RecommendationCandidate(
            name="Joe's Pizza",
            location="New York, NY",
            address="7 Carmine St",
            cuisine_type="Pizza",
            price_range="$",
        )

        restaurant, created = resolver.resolve_with_status(candidate)

        assert created is True
        assert restaurant.name == "Joe's Pizza"
        assert restaurant.city == "New York, NY"
        assert restaurant.address == "7 Carmine St"
        assert restaurant.cuisine_type == "Pizza"
        assert restaurant.price_range == "$"

    def test_reuses_first_match(self) -> None:
        repo = InMemoryRestaurantRepository(
            [
                Restaurant(id="r1", name="Joe's Pizza", city="New York, NY"),
                Restaurant(id="r2", name="Joe's Pizza Broadway", city="New York, NY"),
            ]
        )
        resolver = RestaurantResolver(repo)

        restaurant, created = resolver.resolve_with_status(
            RecommendationCandidate(name="Joe's Pizza", location="New York", cuisine_type="Italian")
        )

        assert created is False
        assert restaurant.id == "r1"
        # no merge into the stored record
        assert restaurant.cuisine_type is None
        assert len(repo.restaurants) == 2

    def test_city_narrows_the_match(self) -> None:
        repo = InMemoryRestaurantRepository([Restaurant(id="r1", name="Joe's Pizza", city="Los Angeles, CA")])
        resolver = RestaurantResolver(repo)

        restaurant = resolver.resolve(RecommendationCandidate(name="Joe's Pizza", location="New York"))

        assert restaurant.id != "r1"
        assert len(repo.restaurants) == 2

    def test_without_location_matches_by_name_only(self) -> None:
        repo = InMemoryRestaurantRepository([Restaurant(id="r1", name="Joe's Pizza", city="Los Angeles, CA")])
        resolver = RestaurantResolver(repo)

        assert resolver.find_existing(RecommendationCandidate(name="joe's pizza")).id == "r1"
