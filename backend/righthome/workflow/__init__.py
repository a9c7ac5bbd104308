"""
LangGraph workflow for the RightHome property co-pilot.
"""

from .graph import (
    ConversationWorkflow,
    create_workflow,
    get_workflow,
    process_user_input,
)

__all__ = [
    "ConversationWorkflow",
    "create_workflow",
    "get_workflow",
    "process_user_input",
]
