from righthome.utils.helpers import (
    clean_llm_response,
    format_field_value,
    format_price,
    format_requirement_map,
)


def test_format_price_in_unit():
    assert format_price(15_000_000, "INR", "Crore") == "₹1.5 Crore"
    assert format_price(8_000_000, "INR", "Lakh") == "₹80 Lakh"
    assert format_price(3_500_000, "AED", "Million") == "AED 3.5 Million"


def test_format_price_picks_unit():
    assert format_price(25_000_000, "INR") == "₹2.5 Crore"
    assert format_price(9_500_000, "INR") == "₹95 Lakh"
    assert format_price(2_000_000, "AED") == "AED 2 Million"
    assert format_price(None) == "N/A"


def test_format_field_values():
    assert format_field_value("bedrooms", 3) == "3 BHK"
    assert format_field_value("bedrooms", "studio") == "Studio"
    assert format_field_value("type", "studio") == "Studio Apartment"
    assert format_field_value("budget", "flexible") == "flexible"


def test_requirement_map_order_and_labels():
    rows = format_requirement_map({
        "stage": 3,
        "city": "Gurgaon",
        "currency": "INR",
        "budgetUnit": "Lakh",
        "budget": 9_000_000,
        "purpose": "Investment",
        "type": "",
    })

    assert [row["field"] for row in rows] == ["purpose", "city", "budget", "currency", "budgetUnit"]
    assert rows[2] == {"field": "budget", "label": "Budget Range", "value": "₹90 Lakh"}


def test_clean_llm_response():
    assert clean_llm_response('Reply: "Which city do you like?"') == "Which city do you like?"
    assert clean_llm_response("one\n\n\n\ntwo") == "one\n\ntwo"
    assert clean_llm_response("") == ""
