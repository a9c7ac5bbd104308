"""
Base agent class providing common functionality for all agents.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..config import get_settings
from ..models.state import ConversationState
from ..services.catalog_service import CatalogService, get_catalog_service


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Each agent handles one step of a chat turn and exposes it as a
    `process(state) -> state` call so it can be used as a LangGraph node.
    """

    def __init__(self, agent_name: str, catalog: Optional[CatalogService] = None):
        """
        Initialize the agent.

        Args:
            agent_name: Name of the agent (used in logs)
            catalog: Listing catalog (defaults to the shared singleton)
        """
        self.agent_name = agent_name
        self._catalog = catalog
        self._settings = get_settings()

    @property
    def catalog(self) -> CatalogService:
        """Get the listing catalog, loading the shared one on first use."""
        if self._catalog is None:
            self._catalog = get_catalog_service()
        return self._catalog

    @abstractmethod
    def process(self, state: ConversationState) -> ConversationState:
        """
        Process the current state and return updated state.

        Args:
            state: Current workflow state

        Returns:
            Updated workflow state
        """
        pass

    def __call__(self, state: ConversationState) -> ConversationState:
        """Allow agents to be called directly."""
        return self.process(state)
