import json

import pytest

from righthome.services.catalog_service import CatalogLoadError, CatalogService


def test_packaged_catalog_loads(packaged_catalog):
    assert len(packaged_catalog) == 20
    assert packaged_catalog.version == "2024.1"
    assert [listing.id for listing in packaged_catalog.list()] == list(range(1, 21))


def test_listing_helpers(packaged_catalog):
    listing = packaged_catalog.get_by_id(1)

    assert listing.category == "apartment"
    assert listing.absolute_price == 120_000_000
    assert packaged_catalog.get_by_id(20).absolute_price == 18_000_000


def test_by_city_is_case_insensitive(packaged_catalog):
    assert [listing.id for listing in packaged_catalog.by_city("GURGAON")] == [1, 2, 3]


def test_bare_list_file(tmp_path):
    path = tmp_path / "listings.json"
    path.write_text(json.dumps([{
        "id": 7,
        "name": "Test Towers",
        "location": "Sector 1, Gurgaon",
        "city": "Gurgaon",
        "price": 90,
        "priceUnit": "Lakh",
        "currency": "INR",
        "type": "Apartment",
        "bedrooms": 2,
        "status": "Ready to Move",
    }]), encoding="utf-8")

    catalog = CatalogService.from_file(path)

    assert catalog.version == "unversioned"
    assert catalog.get_by_id(7).absolute_price == 9_000_000


def test_invalid_catalog_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"listings": [{"id": "x"}]}), encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        CatalogService.from_file(path)


def test_missing_catalog_raises(tmp_path):
    with pytest.raises(CatalogLoadError):
        CatalogService.from_file(tmp_path / "nope.json")
