"""
Catalog service - read-only access to the static listing catalog.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from ..config import get_settings
from ..models.listing import ListingRecord

logger = logging.getLogger(__name__)


class CatalogLoadError(RuntimeError):
    """Raised when the listing catalog cannot be read or validated."""


class CatalogService:
    """
    Immutable, ordered collection of listings.

    Loaded once; declaration order is preserved because ranking ties are
    broken by catalog position.
    """

    def __init__(self, listings: Sequence[ListingRecord], version: str = "unversioned"):
        self._listings: Tuple[ListingRecord, ...] = tuple(listings)
        self._by_id = {listing.id: listing for listing in self._listings}
        self.version = version

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CatalogService":
        """
        Load a catalog from a JSON file.

        The file holds either a bare list of listings or an object with
        "version" and "listings" keys.

        Args:
            path: Path to the catalog JSON

        Returns:
            CatalogService instance
        """
        path = Path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CatalogLoadError(f"Could not read catalog at {path}: {e}") from e

        if isinstance(payload, dict):
            version = str(payload.get("version", "unversioned"))
            raw_listings = payload.get("listings", [])
        else:
            version = "unversioned"
            raw_listings = payload

        try:
            listings = [ListingRecord.model_validate(item) for item in raw_listings]
        except ValidationError as e:
            raise CatalogLoadError(f"Invalid listing in catalog {path}: {e}") from e

        logger.info(f"Loaded {len(listings)} listings from {path} (version {version})")
        return cls(listings, version=version)

    def list(self) -> List[ListingRecord]:
        """All listings in declaration order."""
        return list(self._listings)

    def get_by_id(self, listing_id: int) -> Optional[ListingRecord]:
        return self._by_id.get(listing_id)

    def by_city(self, city: str) -> List[ListingRecord]:
        """Listings whose location mentions the city (case-insensitive)."""
        city_lower = city.strip().lower()
        return [listing for listing in self._listings if city_lower in listing.location.lower()]

    def __len__(self) -> int:
        return len(self._listings)

    def get_stats(self) -> dict:
        return {
            "version": self.version,
            "listings": len(self._listings),
            "cities": sorted({listing.city for listing in self._listings}),
        }


# Singleton instance
_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """
    Get or create the catalog service singleton.

    Returns:
        CatalogService instance
    """
    global _catalog_service

    if _catalog_service is None:
        settings = get_settings()
        path = settings.CATALOG_PATH or settings.DATA_DIR / "listings.json"
        _catalog_service = CatalogService.from_file(path)

    return _catalog_service
