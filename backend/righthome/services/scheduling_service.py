"""
Scheduling service - builds the links a buyer uses to book a visit or get a summary.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..config import get_settings
from ..models.listing import ListingRecord
from ..models.schemas import ScheduleLinks
from ..utils.helpers import format_listing_price, format_requirement_map


class SchedulingService:
    """Builds WhatsApp, Calendly and email links prefilled with a summary."""

    def __init__(
        self,
        whatsapp_number: Optional[str] = None,
        calendly_url: Optional[str] = None,
        support_email: Optional[str] = None
    ):
        settings = get_settings()
        self.whatsapp_number = whatsapp_number or settings.WHATSAPP_NUMBER
        self.calendly_url = calendly_url or settings.CALENDLY_URL
        self.support_email = support_email or settings.SUPPORT_EMAIL

    def build_summary(self, profile: Dict[str, Any], listings: List[ListingRecord]) -> str:
        """
        Plain-text summary of the requirements and shortlisted listings.

        Args:
            profile: Requirement profile
            listings: Listings last recommended to the buyer

        Returns:
            Multi-line summary text
        """
        lines = ["My property requirements:"]

        rows = format_requirement_map(profile)
        if rows:
            lines.extend(f"- {row['label']}: {row['value']}" for row in rows)
        else:
            lines.append("- Not specified yet")

        if listings:
            lines.append("")
            lines.append("Shortlisted properties:")
            for i, listing in enumerate(listings, 1):
                price = format_listing_price(listing.price, listing.price_unit, listing.currency)
                lines.append(f"{i}. {listing.name}, {listing.location} ({price})")

        return "\n".join(lines)

    def build_links(
        self,
        session_id: str,
        profile: Dict[str, Any],
        listings: List[ListingRecord]
    ) -> ScheduleLinks:
        """
        Build scheduling links for a session.

        Args:
            session_id: Session identifier
            profile: Requirement profile
            listings: Listings last recommended to the buyer

        Returns:
            ScheduleLinks
        """
        summary = self.build_summary(profile, listings)
        subject = "Property site visit request"

        return ScheduleLinks(
            session_id=session_id,
            whatsapp=f"https://wa.me/{self.whatsapp_number}?text={quote(summary)}",
            calendly=self.calendly_url,
            email=f"mailto:{self.support_email}?subject={quote(subject)}&body={quote(summary)}",
            summary=summary,
        )


# Singleton instance
_scheduling_service: Optional[SchedulingService] = None


def get_scheduling_service() -> SchedulingService:
    """Get or create the scheduling service singleton."""
    global _scheduling_service
    if _scheduling_service is None:
        _scheduling_service = SchedulingService()
    return _scheduling_service
