from righthome.models.profile import (
    clear_fields,
    has_match_constraint,
    is_empty,
    missing_fields,
    normalize_profile,
)
from righthome.models.state import ConversationStage, create_initial_state, get_stage, normalize_stage


def test_missing_fields_order():
    assert missing_fields({}) == ["city", "purpose", "budget"]
    assert missing_fields({"budget": 100, "city": "Gurgaon"}) == ["purpose"]
    assert missing_fields({"city": "Gurgaon", "purpose": "Investment", "budget": 1}) == []


def test_blank_values_count_as_missing():
    assert missing_fields({"city": "  ", "purpose": None, "budget": 5}) == ["city", "purpose"]


def test_is_empty_ignores_stage():
    assert is_empty({})
    assert is_empty({"stage": 3, "city": ""})
    assert not is_empty({"type": "villa"})


def test_clear_city_cascades():
    profile = {"city": "Dubai", "currency": "AED", "budgetUnit": "Million", "budget": 2_000_000}

    cleared = clear_fields(profile, ["city"])

    assert cleared == {"budget": 2_000_000}
    assert profile["city"] == "Dubai"


def test_normalize_drops_unknown_values():
    assert normalize_profile({"city": "", "type": "plot", "bedrooms": None}) == {"type": "plot"}


def test_match_constraint():
    assert not has_match_constraint({"purpose": "Investment"})
    assert has_match_constraint({"purpose": "Investment", "bedrooms": 3})


def test_stage_clamping():
    assert get_stage(0) is ConversationStage.GREETING
    assert get_stage("not a number") is ConversationStage.GREETING
    assert get_stage(3) is ConversationStage.RECOMMENDATIONS
    assert get_stage(9) is ConversationStage.CLOSED
    assert normalize_stage(9) == 9
    assert normalize_stage(-2) == 1


def test_stage_progress():
    assert ConversationStage.GREETING.progress == 0
    assert ConversationStage.RECOMMENDATIONS.progress == 40
    assert ConversationStage.SUMMARY.progress == 100
    assert ConversationStage.CLOSED.progress == 100


def test_initial_state_copies_profile():
    profile = {"city": "Gurgaon"}
    state = create_initial_state("hi", profile=profile, stage=2)

    state["profile"]["type"] = "villa"

    assert profile == {"city": "Gurgaon"}
    assert state["stage"] == 2
