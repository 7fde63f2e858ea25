from __future__ import annotations

import logging

from foodiefind.app.domain.models import RecommendationCandidate, ResolutionPolicy, Restaurant
from foodiefind.app.infra.db.base import RestaurantRepository

logger = logging.getLogger(__name__)


class RestaurantResolver:
    """Maps an extracted candidate to a stored restaurant, creating one when nothing matches."""

    def __init__(
        self,
        restaurants: RestaurantRepository,
        policy: ResolutionPolicy = ResolutionPolicy.FIRST_MATCH_NO_MERGE,
    ) -> None:
        if policy is not ResolutionPolicy.FIRST_MATCH_NO_MERGE:
            raise ValueError(f"Unsupported resolution policy: {policy}")
        self.restaurants = restaurants
        self.policy = policy

    def find_existing(self, candidate: RecommendationCandidate) -> Restaurant | None:
        matches = self.restaurants.find_by_name(candidate.name, city=candidate.location)
        return matches[0] if matches else None

    def resolve_with_status(self, candidate: RecommendationCandidate) -> tuple[Restaurant, bool]:
        """Return the matched or newly created restaurant and whether it was created."""
        existing = self.find_existing(candidate)
        if existing is not None:
            logger.debug("Matched candidate %s to restaurant %s", candidate.name, existing.id)
            return existing, False

        created = self.restaurants.create_restaurant(
            {
                "name": candidate.name,
                "address": candidate.address,
                "city": candidate.location,
                "cuisine_type": candidate.cuisine_type,
                "price_range": candidate.price_range,
            }
        )
        logger.info("Created restaurant %s (%s)", created.name, created.id)
        return created, True

    def resolve(self, candidate: RecommendationCandidate) -> Restaurant:
        restaurant, _ = self.resolve_with_status(candidate)
        return restaurant
