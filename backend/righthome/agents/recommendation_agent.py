"""
Recommendation Agent - Ranks catalog listings against the buyer's requirements.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .base_agent import BaseAgent
from ..models.listing import ListingRecord
from ..models.profile import has_field
from ..models.state import ConversationState
from ..services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

NO_MATCH_RESPONSE = (
    "I couldn't find properties matching all your criteria. "
    "Would you like to adjust your preferences?"
)
NO_MATCH_QUICK_REPLIES = ["Adjust budget", "Change location", "Modify property type"]


class RecommendationResult(NamedTuple):
    """Listings picked for one turn and how they were picked."""

    listings: List[ListingRecord]
    exact: bool
    scores: Dict[int, float]


class RecommendationAgent(BaseAgent):
    """
    Two-tier recommender.

    First an exact pass keeps listings that satisfy every requirement the
    buyer has given. Only when nothing passes does a scored pass rank the
    whole catalog by weighted partial credit. Requirements that are not set
    neither constrain nor score.
    """

    FIELD_WEIGHTS = {
        "city": 2.0,
        "type": 2.0,
        "bedrooms": 1.5,
        "status": 1.0,
    }
    BUDGET_WEIGHT = 2.0
    BUDGET_SOFT_WEIGHT = 1.0

    def __init__(self, catalog: Optional[CatalogService] = None):
        super().__init__("recommendation_agent", catalog=catalog)
        self.limit = self._settings.MAX_RECOMMENDATIONS
        self.tolerance = self._settings.BUDGET_TOLERANCE
        self.soft_tolerance = self._settings.BUDGET_SOFT_TOLERANCE

    def process(self, state: ConversationState) -> ConversationState:
        """
        Attach recommendations when the stage logic asked for them.

        An empty result replaces the reply and quick replies with an
        invitation to relax the requirements.

        Args:
            state: Current workflow state

        Returns:
            Updated state with recommendations
        """
        if not state.get("show_recommendations"):
            return state

        result = self.rank(state.get("profile", {}))
        state["recommendations"] = result.listings
        state["exact_match"] = result.exact

        if not result.listings:
            logger.info("No listings to recommend, asking buyer to adjust preferences")
            state["response"] = NO_MATCH_RESPONSE
            state["quick_replies"] = list(NO_MATCH_QUICK_REPLIES)

        return state

    def recommend(self, profile: Dict[str, Any]) -> List[ListingRecord]:
        """Up to `limit` listings for the profile."""
        return self.rank(profile).listings

    def rank(self, profile: Dict[str, Any]) -> RecommendationResult:
        """
        Run the exact pass, falling back to the scored pass.

        Args:
            profile: Requirement profile (any subset of fields)

        Returns:
            RecommendationResult with listings in ranked order
        """
        listings = self.catalog.list()

        exact = [listing for listing in listings if self.is_exact_match(listing, profile)]
        if exact:
            picked = exact[:self.limit]
            logger.debug(f"Exact pass matched {len(exact)} listings")
            return RecommendationResult(
                listings=picked,
                exact=True,
                scores={listing.id: self.score(listing, profile) for listing in picked},
            )

        scored: List[Tuple[ListingRecord, float]] = [
            (listing, self.score(listing, profile)) for listing in listings
        ]
        # sorted() is stable, so equal scores keep catalog order
        ranked = sorted(scored, key=lambda item: item[1], reverse=True)[:self.limit]
        logger.debug(f"Scored pass ranked {len(scored)} listings")
        return RecommendationResult(
            listings=[listing for listing, _ in ranked],
            exact=False,
            scores={listing.id: score for listing, score in ranked},
        )

    def has_exact_matches(self, profile: Dict[str, Any]) -> bool:
        return any(self.is_exact_match(listing, profile) for listing in self.catalog.list())

    def is_exact_match(self, listing: ListingRecord, profile: Dict[str, Any]) -> bool:
        """True when the listing satisfies every requirement that is set."""
        if has_field(profile, "city") and not self._city_matches(listing, profile["city"]):
            return False
        if has_field(profile, "type") and not self._type_matches(listing, profile["type"]):
            return False
        if has_field(profile, "bedrooms") and not self._bedrooms_match(listing, profile["bedrooms"]):
            return False
        if has_field(profile, "status") and not self._status_matches(listing, profile["status"]):
            return False
        if has_field(profile, "budget"):
            deviation = self._budget_deviation(listing, profile)
            if deviation is None or deviation > self.tolerance:
                return False
        return True

    def score(self, listing: ListingRecord, profile: Dict[str, Any]) -> float:
        """Weighted partial credit for each requirement the listing meets."""
        total = 0.0

        if has_field(profile, "city") and self._city_matches(listing, profile["city"]):
            total += self.FIELD_WEIGHTS["city"]
        if has_field(profile, "type") and self._type_matches(listing, profile["type"]):
            total += self.FIELD_WEIGHTS["type"]
        if has_field(profile, "bedrooms") and self._bedrooms_match(listing, profile["bedrooms"]):
            total += self.FIELD_WEIGHTS["bedrooms"]
        if has_field(profile, "status") and self._status_matches(listing, profile["status"]):
            total += self.FIELD_WEIGHTS["status"]

        if has_field(profile, "budget"):
            deviation = self._budget_deviation(listing, profile)
            if deviation is not None:
                if deviation <= self.tolerance:
                    total += self.BUDGET_WEIGHT
                elif deviation <= self.soft_tolerance:
                    total += self.BUDGET_SOFT_WEIGHT

        return total

    def _city_matches(self, listing: ListingRecord, city: Any) -> bool:
        return str(city).strip().lower() in listing.location.lower()

    def _type_matches(self, listing: ListingRecord, property_type: Any) -> bool:
        return listing.category == str(property_type).strip().lower()

    def _bedrooms_match(self, listing: ListingRecord, bedrooms: Any) -> bool:
        if isinstance(bedrooms, str) and not bedrooms.strip().isdigit():
            return str(listing.bedrooms).strip().lower() == bedrooms.strip().lower()
        try:
            return int(listing.bedrooms) == int(bedrooms)
        except (TypeError, ValueError):
            return False

    def _status_matches(self, listing: ListingRecord, status: Any) -> bool:
        return listing.status == status

    def _budget_deviation(self, listing: ListingRecord, profile: Dict[str, Any]) -> Optional[float]:
        """
        Relative distance between listing price and budget.

        None when the budget is unusable or the listing is priced in a
        different currency than the buyer's.
        """
        try:
            budget = float(profile["budget"])
        except (TypeError, ValueError):
            return None
        if budget <= 0:
            return None

        currency = profile.get("currency")
        if currency and listing.currency != currency:
            return None

        return abs(listing.absolute_price - budget) / budget


# Singleton instance
_recommendation_agent: RecommendationAgent = None


def get_recommendation_agent() -> RecommendationAgent:
    """Get or create the recommendation agent singleton."""
    global _recommendation_agent
    if _recommendation_agent is None:
        _recommendation_agent = RecommendationAgent()
    return _recommendation_agent

