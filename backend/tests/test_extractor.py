import pytest

from righthome.agents.extractor_agent import ExtractorAgent
from righthome.models.state import create_initial_state


@pytest.fixture()
def extractor():
    return ExtractorAgent()


def test_city_synonym_sets_currency_and_unit(extractor):
    profile = extractor.extract("Looking for something in gurugram", {})

    assert profile["city"] == "Gurgaon"
    assert profile["currency"] == "INR"
    assert profile["budgetUnit"] == "Lakh"


def test_dubai_uses_aed_millions(extractor):
    profile = extractor.extract("A villa in Dubai for 3.5 million", {})

    assert profile["city"] == "Dubai"
    assert profile["currency"] == "AED"
    assert profile["budgetUnit"] == "Million"
    assert profile["budget"] == 3_500_000
    assert profile["type"] == "villa"


def test_mumbai_crore_budget_is_converted(extractor):
    profile = extractor.extract("3BHK in Mumbai around 1.5 crore", {})

    assert profile["budget"] == 15_000_000
    assert profile["bedrooms"] == 3


def test_budget_uses_known_city_unit(extractor):
    profile = extractor.extract("my budget is 80 lakhs", {"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh"})

    assert profile["budget"] == 8_000_000


def test_budget_in_wrong_unit_is_ignored(extractor):
    # Dubai budgets are read in millions, so crore is not understood there
    profile = extractor.extract("Looking for a 3BHK in Dubai under 2 Cr", {})

    assert profile["city"] == "Dubai"
    assert profile["bedrooms"] == 3
    assert "budget" not in profile


def test_budget_without_city_is_ignored(extractor):
    assert "budget" not in extractor.extract("around 90 lakhs", {})


def test_budget_with_currency_name_uses_city_unit(extractor):
    # Dubai amounts are in millions whichever suffix is typed
    profile = extractor.extract(
        "my budget is 2 AED", {"city": "Dubai", "currency": "AED", "budgetUnit": "Million"}
    )

    assert profile["budget"] == 2_000_000


@pytest.mark.parametrize("text, expected", [
    ("I want a flat", "apartment"),
    ("a bungalow near the park", "villa"),
    ("some empty land", "plot"),
    ("a studio apartment downtown", "studio"),
    ("a duplex with terrace", "penthouse"),
    ("an office space", "commercial"),
])
def test_property_type_synonyms(extractor, text, expected):
    assert extractor.extract(text, {})["type"] == expected


def test_studio_bedrooms(extractor):
    assert extractor.extract_bedrooms("a studio please") == "studio"
    assert extractor.extract_bedrooms("2 bedroom house") == 2
    assert extractor.extract_bedrooms("nothing here") is None


def test_purpose_and_status(extractor):
    profile = extractor.extract("for investment, ready to move in", {})

    assert profile["purpose"] == "Investment"
    assert profile["status"] == "Ready to Move"


def test_under_construction_status(extractor):
    assert extractor.extract("an upcoming project", {})["status"] == "Under Construction"


def test_known_fields_are_not_overwritten(extractor):
    profile = extractor.extract("what about Mumbai", {"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh"})

    assert profile["city"] == "Gurgaon"


def test_unmatched_text_leaves_profile_unchanged(extractor):
    original = {"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh"}

    assert extractor.extract("hmm, let me think", original) == original


def test_extract_does_not_mutate_input(extractor):
    original = {"city": "Gurgaon"}
    extractor.extract("a 3 bhk flat", original)

    assert original == {"city": "Gurgaon"}


def test_extract_restricted_to_fields(extractor):
    profile = extractor.extract("a villa in Mumbai", {}, fields=["type"])

    assert profile == {"type": "villa"}


def test_update_cue_names_field(extractor):
    profile = {"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh", "budget": 9_000_000}

    assert extractor.detect_update_cues("I want to change my budget", profile) == ["budget"]


def test_update_cue_by_new_value(extractor):
    profile = {"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh"}

    assert extractor.detect_update_cues("show me Dubai instead", profile) == ["city"]


def test_update_cue_needs_change_word(extractor):
    profile = {"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh"}

    assert extractor.detect_update_cues("what about Dubai", profile) == []


def test_process_replaces_city_on_update_cue(extractor):
    state = create_initial_state(
        "switch to Dubai instead",
        profile={"city": "Gurgaon", "currency": "INR", "budgetUnit": "Lakh", "purpose": "Investment"},
        stage=3,
    )

    state = extractor.process(state)

    assert state["cleared_fields"] == ["city"]
    assert state["profile"]["city"] == "Dubai"
    assert state["profile"]["currency"] == "AED"
    assert state["profile"]["budgetUnit"] == "Million"
    assert state["profile"]["purpose"] == "Investment"


@pytest.mark.parametrize("text", ["Start over", "please reset", "let's START   OVER"])
def test_reset_cue(extractor, text):
    state = create_initial_state(text, profile={"city": "Gurgaon", "budget": 1}, stage=4)

    state = extractor.process(state)

    assert state["reset"] is True
    assert state["profile"] == {}
    assert state["updated_stage"] == 1
