"""
Catalog listing models.
"""

from typing import List, Optional, Union
from pydantic import BaseModel, Field

from .vocabulary import BudgetUnit, match_property_type


class ListingDetails(BaseModel):
    """Extended information shown when a buyer opens a listing."""

    description: str = Field("", description="Marketing description of the project")
    amenities: List[str] = Field(default_factory=list, description="Project amenities")
    floor_plans: List[str] = Field(default_factory=list, alias="floorPlans", description="Floor plan image paths")
    possession_date: Optional[str] = Field(None, alias="possessionDate", description="Possession date or 'Immediate'")
    rera_id: Optional[str] = Field(None, alias="reraId", description="Regulator registration id")
    contact: Optional[str] = Field(None, description="Sales contact")

    class Config:
        populate_by_name = True
        frozen = True


class ListingRecord(BaseModel):
    """
    A property listing from the static catalog.

    Prices are stored in the listing's native unit (e.g. 2.5 with
    price_unit "Crore"); use `absolute_price` to compare against a budget.
    """

    id: int = Field(..., description="Catalog identifier")
    name: str = Field(..., description="Project name")
    location: str = Field(..., description="Free-text location, contains the city name")
    city: str = Field(..., description="City the project is in")
    price: float = Field(..., description="Price in the listing's native unit")
    price_unit: str = Field(..., alias="priceUnit", description="Lakh, Crore or Million")
    currency: str = Field(..., description="INR or AED")
    type: str = Field(..., description="Catalog property type, e.g. 'Luxury Apartment'")
    bedrooms: Union[int, str] = Field(..., description="Bedroom count, or 'NA'/'Studio'")
    size: Optional[int] = Field(None, description="Size in square feet")
    status: str = Field(..., description="Ready to Move or Under Construction")
    builder: str = Field("", description="Developer name")
    features: List[str] = Field(default_factory=list, description="Headline features, in display order")
    image: Optional[str] = Field(None, description="Image reference")
    more_details: Optional[ListingDetails] = Field(None, alias="moreDetails")

    class Config:
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "id": 2,
                "name": "Godrej Summit",
                "location": "Sector 54, Gurgaon",
                "city": "Gurgaon",
                "price": 2.5,
                "priceUnit": "Crore",
                "currency": "INR",
                "type": "Apartment",
                "bedrooms": 3,
                "size": 2100,
                "status": "Ready to Move",
                "builder": "Godrej Properties",
                "features": ["Clubhouse", "Swimming Pool", "Kids Play Area"],
            }
        }

    @property
    def absolute_price(self) -> float:
        """Price in base currency units."""
        unit = BudgetUnit.from_label(self.price_unit)
        if unit is None:
            return float(self.price)
        return float(self.price) * unit.multiplier

    @property
    def category(self) -> str:
        """Normalized property type ('Luxury Apartment' -> 'apartment')."""
        info = match_property_type(self.type)
        return info.name if info else self.type.strip().lower()
