import asyncio

import pytest

from righthome.agents.recommendation_agent import NO_MATCH_QUICK_REPLIES, NO_MATCH_RESPONSE
from righthome.services.reply_generator import ReplyGenerationError, ReplyGenerator
from righthome.workflow.graph import ConversationWorkflow


class EchoReplyGenerator(ReplyGenerator):
    """Records calls and returns a fixed reply."""

    def __init__(self, reply="Phrased reply"):
        self.reply = reply
        self.calls = []

    async def generate(self, utterance, profile, stage, missing_fields, has_matches, draft=""):
        self.calls.append({
            "utterance": utterance,
            "profile": profile,
            "stage": stage,
            "missing_fields": missing_fields,
            "has_matches": has_matches,
            "draft": draft,
        })
        return self.reply


class FailingReplyGenerator(ReplyGenerator):
    async def generate(self, utterance, profile, stage, missing_fields, has_matches, draft=""):
        raise ConnectionError("model unavailable")


def test_first_message_captures_city_and_type(run_turn):
    result = run_turn("I want to buy a flat in Gurgaon", {}, stage=1)

    assert result.updated_requirement_map["city"] == "Gurgaon"
    assert result.updated_requirement_map["type"] == "apartment"
    assert result.updated_stage == 2
    assert result.missing_fields == ["purpose", "budget"]
    assert "personal use, investment, or commercial" in result.response
    assert not result.show_recommendations


def test_mumbai_budget_in_crore(run_turn):
    result = run_turn("Looking in Mumbai for 1.5 crore, for investment", {}, stage=1)

    assert result.updated_requirement_map["budget"] == 15_000_000
    assert result.updated_stage == 3
    assert result.show_recommendations
    assert [listing.id for listing in result.recommendations] == [4]


def test_reset_clears_everything(run_turn, gurgaon_profile):
    result = run_turn("let's start over", gurgaon_profile, stage=4)

    assert result.updated_requirement_map == {}
    assert result.updated_stage == 1
    assert result.missing_fields == ["city", "purpose", "budget"]
    assert result.recommendations == []


def test_positive_feedback_moves_to_scheduling(run_turn, gurgaon_profile):
    result = run_turn("this looks great", gurgaon_profile, stage=3)

    assert result.updated_stage == 4
    assert result.show_schedule_options
    assert [listing.id for listing in result.recommendations] == [2]


def test_price_objection_drops_budget(run_turn, gurgaon_profile):
    result = run_turn("the price is too expensive", gurgaon_profile, stage=5)

    assert "budget" not in result.updated_requirement_map
    assert result.updated_stage == 3
    assert result.show_recommendations
    assert [listing.id for listing in result.recommendations] == [1, 2, 3]


def test_update_cue_replaces_budget(run_turn, gurgaon_profile):
    result = run_turn("change my budget to 1200 lakh", gurgaon_profile, stage=3)

    assert result.updated_requirement_map["budget"] == 120_000_000
    assert [listing.id for listing in result.recommendations] == [1]


def test_different_area_objection_names_cleared_city(run_turn, gurgaon_profile):
    result = run_turn("show me a different area", gurgaon_profile, stage=3)

    assert result.updated_stage == 5
    assert "city" not in result.updated_requirement_map
    assert result.updated_requirement_map["budget"] == 25_000_000
    assert result.response.startswith("I understand. I've cleared your preferred city. ")
    assert "city" in result.missing_fields


def test_input_profile_is_not_mutated(run_turn, gurgaon_profile):
    snapshot = dict(gurgaon_profile)

    run_turn("the price is too expensive", gurgaon_profile, stage=5)

    assert gurgaon_profile == snapshot


def test_empty_result_overrides_reply(empty_catalog):
    workflow = ConversationWorkflow(catalog=empty_catalog, reply_generator=EchoReplyGenerator())

    result = workflow.run("hmm", {"city": "Gurgaon", "purpose": "Investment", "budget": 1}, stage=3)

    assert result.recommendations == []
    assert result.response == NO_MATCH_RESPONSE
    assert result.quick_replies == NO_MATCH_QUICK_REPLIES


def test_generator_phrases_opening_turns(small_catalog):
    generator = EchoReplyGenerator("Lovely! Is this for living in or investing?")
    workflow = ConversationWorkflow(catalog=small_catalog, reply_generator=generator)

    result = workflow.run("I want to buy a flat in Gurgaon", {}, stage=1)

    assert result.response == "Lovely! Is this for living in or investing?"
    assert result.updated_stage == 2
    assert len(generator.calls) == 1
    call = generator.calls[0]
    assert call["missing_fields"] == ["purpose", "budget"]
    assert call["has_matches"] is False
    assert call["draft"].endswith("commercial purposes?")


@pytest.mark.parametrize("utterance, stage", [
    ("this looks great", 3),
    ("start over", 2),
])
def test_generator_not_used_for_later_stages_or_reset(small_catalog, gurgaon_profile, utterance, stage):
    generator = EchoReplyGenerator()
    workflow = ConversationWorkflow(catalog=small_catalog, reply_generator=generator)

    result = workflow.run(utterance, gurgaon_profile, stage=stage)

    assert generator.calls == []
    assert result.response != "Phrased reply"


def test_generator_failure_carries_canned_result(small_catalog):
    workflow = ConversationWorkflow(catalog=small_catalog, reply_generator=FailingReplyGenerator())

    with pytest.raises(ReplyGenerationError) as exc_info:
        asyncio.run(workflow.arun("I want to buy a flat in Gurgaon", {}, stage=1))

    fallback = exc_info.value.fallback
    assert fallback.updated_stage == 2
    assert fallback.updated_requirement_map["city"] == "Gurgaon"
    assert fallback.missing_fields == ["purpose", "budget"]
    assert "commercial purposes?" in fallback.response


def test_turn_result_serializes_with_camel_case(run_turn):
    payload = run_turn("I want to buy a flat in Gurgaon").model_dump(by_alias=True)

    assert set(payload) == {
        "response",
        "updatedRequirementMap",
        "updatedStage",
        "showRecommendations",
        "showScheduleOptions",
        "missingFields",
        "quickReplies",
        "recommendations",
    }


def test_diagram_mentions_every_node(workflow):
    diagram = workflow.get_graph_visualization()

    for node in ("Extractor", "Stage Agent", "Recommendation", "Conversation"):
        assert node in diagram
