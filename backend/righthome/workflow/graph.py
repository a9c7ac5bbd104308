"""
LangGraph workflow definition for one turn of the property co-pilot.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from langgraph.graph import StateGraph, END

from ..agents import (
    ConversationManager,
    ExtractorAgent,
    RecommendationAgent,
    StageAgent,
    build_turn_result,
)
from ..models.schemas import TurnResult
from ..models.state import ConversationState, create_initial_state
from ..services.catalog_service import CatalogService
from ..services.reply_generator import ReplyGenerator

logger = logging.getLogger(__name__)


class ConversationWorkflow:
    """
    Turn pipeline: extract -> stage -> (recommend) -> compose.

    Each workflow owns its agents, so a catalog or reply generator can be
    swapped in without touching the shared singletons.
    """

    def __init__(
        self,
        catalog: Optional[CatalogService] = None,
        reply_generator: Optional[ReplyGenerator] = None
    ):
        self.extractor = ExtractorAgent()
        self.recommender = RecommendationAgent(catalog=catalog)
        self.stage_agent = StageAgent(extractor=self.extractor, recommender=self.recommender)
        self.conversation_manager = ConversationManager(reply_generator=reply_generator)

        self._graph = None
        self._compiled_app = None
        self._build_graph()

    def _build_graph(self):
        """Build the LangGraph workflow graph."""
        self._graph = StateGraph(ConversationState)

        self._graph.add_node("extract", self.extractor.process)
        self._graph.add_node("stage", self.stage_agent.process)
        self._graph.add_node("recommend", self.recommender.process)
        self._graph.add_node("compose", self.conversation_manager.process)

        self._graph.set_entry_point("extract")
        self._graph.add_edge("extract", "stage")

        self._graph.add_conditional_edges(
            "stage",
            self._route_after_stage,
            {
                "recommend": "recommend",
                "compose": "compose",
            }
        )

        self._graph.add_edge("recommend", "compose")
        self._graph.add_edge("compose", END)

        self._compiled_app = self._graph.compile()

    def _route_after_stage(self, state: ConversationState) -> str:
        """Go through the recommender only when the stage asked for listings."""
        if state.get("show_recommendations"):
            return "recommend"
        return "compose"

    async def arun(
        self,
        utterance: str,
        profile: Optional[Dict[str, Any]] = None,
        stage: int = 1
    ) -> TurnResult:
        """
        Process one chat turn.

        Args:
            utterance: The buyer's message
            profile: Requirement profile from the previous turn (not modified)
            stage: Conversation stage from the previous turn

        Returns:
            TurnResult for the turn

        Raises:
            ReplyGenerationError: the reply generator failed; its `fallback`
                holds the canned result
        """
        initial_state = create_initial_state(utterance=utterance, profile=profile, stage=stage)

        logger.info(f"Turn started at stage {initial_state['stage']}: {utterance[:50] if utterance else ''}")

        final_state = await self._compiled_app.ainvoke(initial_state)
        result = build_turn_result(final_state)

        logger.info(
            f"Turn finished at stage {result.updated_stage}, "
            f"{len(result.recommendations)} recommendations"
        )
        return result

    def run(
        self,
        utterance: str,
        profile: Optional[Dict[str, Any]] = None,
        stage: int = 1
    ) -> TurnResult:
        """Synchronous version of arun, for scripts and tests."""
        return asyncio.run(self.arun(utterance, profile=profile, stage=stage))

    def get_graph_visualization(self) -> str:
        """
        Get a text representation of the workflow graph.

        Returns:
            ASCII diagram of the graph
        """
        diagram = """
        ┌─────────────────────────────────────────────┐
        │           Property Co-pilot Turn            │
        └─────────────────────────────────────────────┘
                               │
                               ▼
                      ┌─────────────────┐
                      │    Extractor    │
                      │ (reset, update, │
                      │    fields)      │
                      └────────┬────────┘
                               │
                               ▼
                      ┌─────────────────┐
                      │   Stage Agent   │
                      │ (next stage,    │
                      │  canned reply)  │
                      └────────┬────────┘
                               │
                 show recs?    │
                ┌──────────────┴─────────────┐
                ▼ yes                        │ no
        ┌────────────────┐                   │
        │ Recommendation │                   │
        │     Agent      │                   │
        └───────┬────────┘                   │
                └──────────────┬─────────────┘
                               ▼
                      ┌─────────────────┐
                      │  Conversation   │
                      │    Manager      │
                      └────────┬────────┘
                               │
                               ▼
                          ┌─────────┐
                          │   END   │
                          └─────────┘
        """
        return diagram


# Singleton workflow instance
_workflow: Optional[ConversationWorkflow] = None


def create_workflow(
    catalog: Optional[CatalogService] = None,
    reply_generator: Optional[ReplyGenerator] = None
) -> ConversationWorkflow:
    """
    Create a new workflow instance.

    Returns:
        ConversationWorkflow instance
    """
    return ConversationWorkflow(catalog=catalog, reply_generator=reply_generator)


def get_workflow() -> ConversationWorkflow:
    """
    Get or create the singleton workflow instance.

    Returns:
        ConversationWorkflow singleton
    """
    global _workflow

    if _workflow is None:
        _workflow = create_workflow()

    return _workflow


async def process_user_input(
    utterance: str,
    profile: Optional[Dict[str, Any]] = None,
    stage: int = 1
) -> TurnResult:
    """
    Process one chat turn with the shared workflow.

    Args:
        utterance: The buyer's message
        profile: Requirement profile from the previous turn
        stage: Conversation stage from the previous turn

    Returns:
        TurnResult for the turn
    """
    return await get_workflow().arun(utterance, profile=profile, stage=stage)
