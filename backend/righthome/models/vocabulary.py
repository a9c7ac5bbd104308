"""
Static lookup tables used to read requirements out of chat messages.

Every table is an immutable tuple of records so extraction rules can be
tested one at a time.
"""

import re
from re import Pattern
from functools import lru_cache
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple, Optional, Sequence, Tuple


class Currency(str, Enum):
    """Currencies the catalog is priced in."""

    INR = "INR"
    AED = "AED"


class BudgetUnit(str, Enum):
    """Units buyers quote budgets in, with their absolute multiplier."""

    LAKH = "Lakh"
    CRORE = "Crore"
    MILLION = "Million"

    @property
    def multiplier(self) -> int:
        return _UNIT_MULTIPLIERS[self]

    @property
    def aliases(self) -> Tuple[str, ...]:
        """Spellings accepted after a number, longest first."""
        return _UNIT_ALIASES[self]

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["BudgetUnit"]:
        if not label:
            return None
        for unit in cls:
            if unit.value.lower() == str(label).strip().lower():
                return unit
        return None


_UNIT_MULTIPLIERS = {
    BudgetUnit.LAKH: 100_000,
    BudgetUnit.CRORE: 10_000_000,
    BudgetUnit.MILLION: 1_000_000,
}

_UNIT_ALIASES = {
    BudgetUnit.LAKH: ("lakhs", "lakh", "lacs", "lac"),
    BudgetUnit.CRORE: ("crores", "crore", "cr"),
    BudgetUnit.MILLION: ("millions", "million", "mn"),
}


class Purpose(str, Enum):
    PERSONAL_USE = "Personal Use"
    INVESTMENT = "Investment"
    COMMERCIAL = "Commercial"


class ConstructionStatus(str, Enum):
    READY_TO_MOVE = "Ready to Move"
    UNDER_CONSTRUCTION = "Under Construction"


class CityInfo(NamedTuple):
    """A spelling of a supported city and the pricing conventions used there."""

    key: str
    name: str
    currency: Currency
    budget_unit: BudgetUnit


class PropertyTypeInfo(NamedTuple):
    """A normalized property type and the words buyers use for it."""

    name: str
    synonyms: Tuple[str, ...]
    label: str
    plural: str


class KeywordRule(NamedTuple):
    """Maps any of a group of keywords to a single field value."""

    value: str
    keywords: Tuple[str, ...]


SUPPORTED_CITIES: Tuple[CityInfo, ...] = (
    CityInfo("gurgaon", "Gurgaon", Currency.INR, BudgetUnit.LAKH),
    CityInfo("gurugram", "Gurgaon", Currency.INR, BudgetUnit.LAKH),
    CityInfo("delhi", "Delhi", Currency.INR, BudgetUnit.LAKH),
    CityInfo("mumbai", "Mumbai", Currency.INR, BudgetUnit.CRORE),
    CityInfo("bangalore", "Bangalore", Currency.INR, BudgetUnit.LAKH),
    CityInfo("bengaluru", "Bangalore", Currency.INR, BudgetUnit.LAKH),
    CityInfo("hyderabad", "Hyderabad", Currency.INR, BudgetUnit.LAKH),
    CityInfo("dubai", "Dubai", Currency.AED, BudgetUnit.MILLION),
    CityInfo("abudhabi", "Abu Dhabi", Currency.AED, BudgetUnit.MILLION),
    CityInfo("abu dhabi", "Abu Dhabi", Currency.AED, BudgetUnit.MILLION),
    CityInfo("sharjah", "Sharjah", Currency.AED, BudgetUnit.MILLION),
)

PROPERTY_TYPES: Tuple[PropertyTypeInfo, ...] = (
    PropertyTypeInfo("apartment", ("flat", "apartment", "condo", "condominium"), "Apartment", "apartments"),
    PropertyTypeInfo("villa", ("villa", "house", "bungalow", "townhouse"), "Villa", "villas"),
    PropertyTypeInfo("plot", ("plot", "land", "empty land"), "Plot", "plots"),
    PropertyTypeInfo("penthouse", ("penthouse", "duplex"), "Penthouse", "penthouses"),
    PropertyTypeInfo("studio", ("studio", "studio apartment"), "Studio Apartment", "studio apartments"),
    PropertyTypeInfo("commercial", ("office", "shop", "showroom"), "Commercial Space", "commercial spaces"),
)

PURPOSE_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(Purpose.PERSONAL_USE.value, ("personal", "live", "own use")),
    KeywordRule(Purpose.INVESTMENT.value, ("invest", "rental", "return")),
    KeywordRule(Purpose.COMMERCIAL.value, ("commercial", "office", "business")),
)

STATUS_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(ConstructionStatus.READY_TO_MOVE.value, ("ready", "move in")),
    KeywordRule(ConstructionStatus.UNDER_CONSTRUCTION.value, ("under construction", "upcoming")),
)

# Fields that must be known before recommendations are shown, in prompt order
REQUIRED_FIELDS: Tuple[str, ...] = ("city", "purpose", "budget")

# Fields the recommendation scorer can match a listing against
MATCH_FIELDS: Tuple[str, ...] = ("city", "type", "bedrooms", "status", "budget")

# Words that name a field when the buyer asks to change it
FIELD_SYNONYMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("city", ("city", "location", "area")),
    ("budget", ("budget", "price")),
    ("type", ("type", "kind")),
    ("bedrooms", ("bedroom", "bhk")),
    ("purpose", ("purpose",)),
    ("status", ("status", "possession")),
)

# Fields that only exist because city was set
CITY_DERIVED_FIELDS: Tuple[str, ...] = ("currency", "budgetUnit")

FIELD_PROMPTS = MappingProxyType({
    "city": (
        "Which city are you looking to buy in? We operate in multiple locations "
        "including Gurgaon, Mumbai, Bangalore, and Dubai."
    ),
    "purpose": "Are you buying for personal use, investment, or commercial purposes?",
    "budget": "What's your budget range for this property? (in {budget_unit})",
    "bedrooms": "How many bedrooms are you looking for?",
    "type": "What type of property are you interested in? (Apartment, Villa, Plot, etc.)",
    "status": "Do you prefer ready-to-move properties or under-construction projects?",
})

DISPLAY_LABELS = MappingProxyType({
    "purpose": "Purpose",
    "city": "City",
    "budget": "Budget Range",
    "bedrooms": "Bedrooms",
    "currency": "Currency",
    "budgetUnit": "Budget Unit",
    "status": "Construction Status",
    "type": "Property Type",
})

CITY_BLURBS = MappingProxyType({
    "Gurgaon": "Properties in Gurgaon offer excellent connectivity to Delhi, with good infrastructure and amenities.",
    "Mumbai": "Mumbai properties are premium investments with high appreciation potential.",
    "Bangalore": "Bangalore offers a mix of modern apartments and villas with good tech infrastructure.",
    "Dubai": "Dubai properties come with world-class amenities and tax-free benefits.",
})


def keyword_regex(keywords: Sequence[str]) -> Pattern:
    """
    Compile keywords into one case-insensitive pattern anchored at word starts.

    Longer keywords are tried first so multi-word phrases win over their prefixes.
    """
    ordered = sorted(keywords, key=len, reverse=True)
    alternation = "|".join(r"\s+".join(re.escape(part) for part in k.split()) for k in ordered)
    return re.compile(rf"\b(?:{alternation})", re.IGNORECASE)


def find_city(name: Optional[str]) -> Optional[CityInfo]:
    """Look up the table entry for a normalized city name."""
    if not name:
        return None
    name_lower = str(name).strip().lower()
    for city in SUPPORTED_CITIES:
        if city.name.lower() == name_lower:
            return city
    return None


def find_property_type(name: Optional[str]) -> Optional[PropertyTypeInfo]:
    if not name:
        return None
    for info in PROPERTY_TYPES:
        if info.name == str(name).strip().lower():
            return info
    return None


@lru_cache(maxsize=None)
def _synonym_pattern(synonym: str) -> Pattern:
    return keyword_regex((synonym,))


def match_property_type(text: str) -> Optional[PropertyTypeInfo]:
    """
    Resolve free text to a property type through the synonym table.

    When several synonyms match, the longest one wins, so "studio apartment"
    resolves to studio rather than apartment.
    """
    best: Optional[PropertyTypeInfo] = None
    best_length = 0
    for info in PROPERTY_TYPES:
        for synonym in info.synonyms:
            if len(synonym) > best_length and _synonym_pattern(synonym).search(text):
                best, best_length = info, len(synonym)
    return best
