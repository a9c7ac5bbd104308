"""
Helper utility functions.
"""

import re
from typing import Dict, Any, List, Optional, Union

from ..models.profile import is_known
from ..models.vocabulary import DISPLAY_LABELS, BudgetUnit, find_property_type

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "AED": "AED ",
}

# Order the requirement map is displayed in
DISPLAY_ORDER = ("purpose", "city", "budget", "bedrooms", "status", "type", "currency", "budgetUnit")


def format_price(
    value: Optional[Union[int, float]],
    currency: Optional[str] = "INR",
    unit: Optional[str] = None
) -> str:
    """
    Format a price for display.

    Absolute amounts are shown in the given unit (Lakh, Crore or Million);
    without a unit, INR amounts of a crore or more use Crore, smaller ones
    Lakh, and AED amounts use Million.

    Args:
        value: Absolute amount (can be None)
        currency: INR or AED
        unit: Display unit name

    Returns:
        Formatted price string, e.g. "₹1.5 Crore"
    """
    if value is None:
        return "N/A"

    symbol = CURRENCY_SYMBOLS.get((currency or "").upper(), f"{currency} " if currency else "")

    budget_unit = BudgetUnit.from_label(unit)
    if budget_unit is None:
        if (currency or "").upper() == "AED":
            budget_unit = BudgetUnit.MILLION
        elif value >= BudgetUnit.CRORE.multiplier:
            budget_unit = BudgetUnit.CRORE
        elif value >= BudgetUnit.LAKH.multiplier:
            budget_unit = BudgetUnit.LAKH

    if budget_unit is None:
        return f"{symbol}{value:,.0f}"

    amount = value / budget_unit.multiplier
    return f"{symbol}{amount:,.2f}".rstrip("0").rstrip(".") + f" {budget_unit.value}"


def format_listing_price(price: float, price_unit: str, currency: str) -> str:
    """Format a catalog price that is already in its native unit."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency} ")
    return f"{symbol}{price:g} {price_unit}"


def format_field_value(field: str, value: Any, profile: Optional[Dict[str, Any]] = None) -> str:
    """
    Turn a stored requirement value into display text.

    Args:
        field: Requirement field name
        value: Stored value
        profile: Full profile (budget formatting needs currency and unit)

    Returns:
        Display string
    """
    profile = profile or {}

    if field == "budget":
        if isinstance(value, str):
            return value
        return format_price(value, profile.get("currency"), profile.get("budgetUnit"))

    if field == "bedrooms":
        if str(value).lower() == "studio":
            return "Studio"
        return f"{value} BHK"

    if field == "type":
        info = find_property_type(value)
        return info.label if info else str(value)

    return str(value)


def format_requirement_map(profile: Dict[str, Any]) -> List[Dict[str, str]]:
    """
    Build the requirement rows shown beside the chat.

    Unknown values and the conversation stage are skipped.

    Args:
        profile: Requirement profile

    Returns:
        List of {"field", "label", "value"} dicts in display order
    """
    rows = []
    for field in DISPLAY_ORDER:
        value = (profile or {}).get(field)
        if not is_known(value):
            continue
        rows.append({
            "field": field,
            "label": DISPLAY_LABELS.get(field, field),
            "value": format_field_value(field, value, profile),
        })
    return rows


def clean_llm_response(response: str) -> str:
    """
    Clean up LLM response text.

    Args:
        response: Raw LLM response

    Returns:
        Cleaned response text
    """
    if not response:
        return ""

    response = response.strip()

    # Drop a leading "Reply:" echoed back from the prompt
    response = re.sub(r'^(?:reply|assistant)\s*:\s*', '', response, flags=re.IGNORECASE)

    # Strip wrapping quotes
    if len(response) >= 2 and response[0] == response[-1] and response[0] in "\"'":
        response = response[1:-1].strip()

    # Collapse runs of blank lines
    response = re.sub(r'\n{3,}', '\n\n', response)

    return response
