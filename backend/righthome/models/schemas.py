"""
Pydantic schemas for the turn contract and API request/response models.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime

from .listing import ListingRecord


class TurnResult(BaseModel):
    """
    Result of processing one chat turn.

    Attribute names are snake_case; serialized names follow the camelCase
    contract the chat UI consumes.
    """

    response: str = Field(..., description="Assistant reply text")
    updated_requirement_map: Dict[str, Any] = Field(
        default_factory=dict, alias="updatedRequirementMap", description="Profile after this turn"
    )
    updated_stage: int = Field(..., alias="updatedStage", description="Conversation stage after this turn")
    show_recommendations: bool = Field(False, alias="showRecommendations")
    show_schedule_options: bool = Field(False, alias="showScheduleOptions")
    missing_fields: List[str] = Field(default_factory=list, alias="missingFields")
    quick_replies: List[str] = Field(default_factory=list, alias="quickReplies")
    recommendations: List[ListingRecord] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "response": "Great! I'd like to understand your requirements better. "
                            "Are you buying for personal use, investment, or commercial purposes?",
                "updatedRequirementMap": {
                    "city": "Gurgaon",
                    "currency": "INR",
                    "budgetUnit": "Lakh",
                    "type": "apartment",
                },
                "updatedStage": 2,
                "showRecommendations": False,
                "showScheduleOptions": False,
                "missingFields": ["purpose", "budget"],
                "quickReplies": [],
                "recommendations": [],
            }
        }


class StageInfo(BaseModel):
    """Display metadata for a conversation stage."""

    number: int = Field(..., description="Stage number")
    title: str = Field(..., description="Stage title")
    description: str = Field(..., description="Short description of the stage")
    progress: int = Field(..., description="Progress percentage (0-100)")


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    session_id: str = Field(..., description="Unique session identifier for the user")
    message: str = Field(..., description="User's message")

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": "sess_abc123",
                "message": "I want to buy a flat in Gurgaon"
            }
        }


class ChatResponse(TurnResult):
    """Response model for the chat endpoint."""

    session_id: str = Field(..., alias="sessionId", description="Session identifier")
    stage_info: StageInfo = Field(..., alias="stageInfo", description="Metadata for the new stage")
    suggestions: List[str] = Field(default_factory=list, description="Suggestion buttons to render")


class ConversationMessage(BaseModel):
    """A single message in the conversation history."""

    role: str = Field(..., description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(..., description="Content of the message")
    timestamp: Optional[datetime] = Field(default_factory=datetime.now, description="When the message was sent")


class RequirementItem(BaseModel):
    """One row of the requirement map as shown to the buyer."""

    field: str
    label: str
    value: str


class SessionView(BaseModel):
    """Current requirement map and stage of a session."""

    session_id: str
    stage_info: StageInfo
    requirements: List[RequirementItem] = Field(default_factory=list)
    requirement_map: Dict[str, Any] = Field(default_factory=dict)
    missing_fields: List[str] = Field(default_factory=list)


class ScheduleLinks(BaseModel):
    """Links the buyer can follow to book a visit or receive a summary."""

    session_id: str
    whatsapp: str = Field(..., description="wa.me link with the summary prefilled")
    calendly: str = Field(..., description="Scheduling page")
    email: str = Field(..., description="mailto link with the summary prefilled")
    summary: str = Field(..., description="Plain-text summary of requirements and shortlisted listings")


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    catalog_loaded: bool = Field(..., description="Whether the listing catalog is loaded")
    listing_count: int = Field(0, description="Number of listings in the catalog")
    llm_enabled: bool = Field(..., description="Whether LLM phrasing is configured")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "catalog_loaded": True,
                "listing_count": 20,
                "llm_enabled": False
            }
        }
