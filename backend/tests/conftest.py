import asyncio

import pytest

from righthome.config import get_settings
from righthome.models.listing import ListingRecord
from righthome.services.catalog_service import CatalogService
from righthome.services.reply_generator import NullReplyGenerator
from righthome.workflow.graph import ConversationWorkflow


def _listing(id, location, price, price_unit, type, bedrooms, status, currency="INR", city=None):
    return ListingRecord(
        id=id,
        name=f"Project {id}",
        location=location,
        city=city or location.split(",")[-1].strip(),
        price=price,
        price_unit=price_unit,
        currency=currency,
        type=type,
        bedrooms=bedrooms,
        status=status,
        builder="Test Builder",
    )


@pytest.fixture()
def small_catalog():
    """Six listings covering Gurgaon, Mumbai and Dubai."""
    return CatalogService([
        _listing(1, "Golf Course Road, Gurgaon", 12, "Crore", "Luxury Apartment", 4, "Ready to Move"),
        _listing(2, "Sector 54, Gurgaon", 2.5, "Crore", "Apartment", 3, "Ready to Move"),
        _listing(3, "Sector 65, Gurgaon", 3.2, "Crore", "Penthouse", 4, "Under Construction"),
        _listing(4, "Worli, Mumbai", 1.5, "Crore", "Apartment", 2, "Ready to Move"),
        _listing(5, "Whitefield, Bangalore", 2.1, "Crore", "Villa", 4, "Ready to Move"),
        _listing(6, "Palm Jumeirah, Dubai", 3.2, "Million", "Villa", 5, "Ready to Move", currency="AED"),
    ], version="test")


@pytest.fixture()
def empty_catalog():
    return CatalogService([], version="empty")


@pytest.fixture()
def packaged_catalog():
    return CatalogService.from_file(get_settings().DATA_DIR / "listings.json")


@pytest.fixture()
def workflow(small_catalog):
    return ConversationWorkflow(catalog=small_catalog, reply_generator=NullReplyGenerator())


@pytest.fixture()
def run_turn(workflow):
    """Run one turn synchronously against the small-catalog workflow."""

    def _run(utterance, profile=None, stage=1):
        return asyncio.run(workflow.arun(utterance, profile=profile, stage=stage))

    return _run


@pytest.fixture()
def gurgaon_profile():
    return {
        "city": "Gurgaon",
        "currency": "INR",
        "budgetUnit": "Lakh",
        "purpose": "Investment",
        "budget": 25000000,
    }
