"""
FastAPI main application for the RightHome property co-pilot.

This is the entry point for the backend API server.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import List, Optional
import logging

from .config import get_settings
from .agents import default_suggestions
from .models.listing import ListingRecord
from .models.schemas import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    RequirementItem,
    ScheduleLinks,
    SessionView,
    StageInfo,
)
from .models.profile import missing_fields
from .models.state import get_stage
from .services import (
    CatalogLoadError,
    ReplyGenerationError,
    get_catalog_service,
    get_scheduling_service,
    get_session_service,
)
from .utils.helpers import format_requirement_map
from .workflow import get_workflow
from . import __version__

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Settings
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup/shutdown events.
    """
    # Startup
    logger.info("Starting RightHome Co-pilot API...")
    logger.info(f"Version: {__version__}")

    try:
        catalog = get_catalog_service()
        logger.info(f"Catalog loaded. Stats: {catalog.get_stats()}")
    except CatalogLoadError as e:
        logger.error(f"Catalog could not be loaded: {e}")

    logger.info("RightHome Co-pilot API started successfully")

    yield

    # Shutdown
    removed = get_session_service().cleanup_stale_sessions()
    logger.info(f"Shutting down RightHome Co-pilot API ({removed} stale sessions dropped)...")


# Create FastAPI application
app = FastAPI(
    title="RightHome Co-pilot API",
    description="""
    A conversational property-buying co-pilot.

    Features:
    - Requirement capture from free-text chat
    - Staged conversation from greeting to follow-up
    - Ranked listing recommendations
    - Site visit and call scheduling links
    """,
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _stage_info(stage: int) -> StageInfo:
    info = get_stage(stage)
    return StageInfo(
        number=stage,
        title=info.title,
        description=info.description,
        progress=info.progress,
    )


# ============================================================
# API Endpoints
# ============================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "RightHome Co-pilot API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """
    Health check endpoint to verify service status.
    """
    catalog_loaded = False
    listing_count = 0

    try:
        catalog = get_catalog_service()
        catalog_loaded = True
        listing_count = len(catalog)
    except CatalogLoadError as e:
        logger.warning(f"Health check: catalog unavailable: {e}")

    return HealthResponse(
        status="healthy" if catalog_loaded else "degraded",
        version=__version__,
        catalog_loaded=catalog_loaded,
        listing_count=listing_count,
        llm_enabled=settings.USE_LLM_REPLIES and bool(settings.OPENAI_API_KEY),
    )


@app.post("/chat", response_model=ChatResponse, tags=["Chat"])
async def chat(request: ChatRequest):
    """
    Main endpoint for chatting with the co-pilot.

    Runs one turn against the session's stored requirements and stage, and
    returns the reply with the updated requirements, stage and listings.
    """
    logger.info(f"Chat from session {request.session_id}: {request.message[:50]}...")

    session_service = get_session_service()
    session = session_service.get_or_create_session(request.session_id)

    try:
        workflow = get_workflow()
        result = await workflow.arun(
            utterance=request.message,
            profile=session.profile,
            stage=session.stage,
        )
    except ReplyGenerationError as e:
        logger.warning(f"Answering session {request.session_id} with canned reply: {e}")
        result = e.fallback
    except Exception as e:
        logger.error(f"Error processing chat turn: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Failed to process message"
        )

    session.apply_turn(
        profile=result.updated_requirement_map,
        stage=result.updated_stage,
        recommendations=result.recommendations,
    )
    session.add_to_history("user", request.message)
    session.add_to_history("assistant", result.response)

    logger.info(f"Response generated for session {request.session_id}, stage: {result.updated_stage}")

    return ChatResponse(
        **dict(result),
        session_id=request.session_id,
        stage_info=_stage_info(result.updated_stage),
        suggestions=result.quick_replies or default_suggestions(result.updated_stage),
    )


@app.get("/session/{session_id}", response_model=SessionView, tags=["Session"])
async def get_session_view(session_id: str):
    """
    Get the requirement map and stage of a session.
    """
    session = get_session_service().get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")

    requirement_map = dict(session.profile)
    requirement_map["stage"] = session.stage

    return SessionView(
        session_id=session_id,
        stage_info=_stage_info(session.stage),
        requirements=[RequirementItem(**row) for row in format_requirement_map(session.profile)],
        requirement_map=requirement_map,
        missing_fields=missing_fields(session.profile),
    )


@app.delete("/session/{session_id}", tags=["Session"])
async def delete_session(session_id: str):
    """
    Delete a session and all its data.
    """
    session_service = get_session_service()
    deleted = session_service.delete_session(session_id)

    return {
        "success": deleted,
        "message": "Session deleted" if deleted else "Session not found",
    }


@app.get("/history/{session_id}", tags=["Session"])
async def get_history(session_id: str, limit: int = 20):
    """
    Get conversation history for a session.
    """
    session_service = get_session_service()
    history = session_service.get_history(session_id, limit)

    return {
        "session_id": session_id,
        "history": history,
        "count": len(history),
    }


@app.get("/properties", response_model=List[ListingRecord], tags=["Properties"])
async def list_properties(city: Optional[str] = None):
    """
    List catalog properties, optionally only those in one city.
    """
    catalog = get_catalog_service()
    if city:
        return catalog.by_city(city)
    return catalog.list()


@app.get("/properties/{property_id}", response_model=ListingRecord, tags=["Properties"])
async def get_property(property_id: int):
    """
    Get the full record of one property, including its details.
    """
    listing = get_catalog_service().get_by_id(property_id)
    if not listing:
        raise HTTPException(status_code=404, detail=f"Property {property_id} not found")
    return listing


@app.get("/schedule/{session_id}", response_model=ScheduleLinks, tags=["Scheduling"])
async def get_schedule_links(session_id: str):
    """
    Get WhatsApp, Calendly and email links prefilled with the session summary.
    """
    session = get_session_service().get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")

    return get_scheduling_service().build_links(
        session_id=session_id,
        profile=session.profile,
        listings=session.last_recommendations,
    )


@app.get("/workflow/diagram", tags=["Debug"])
async def get_workflow_diagram():
    """
    Get a visual representation of the workflow graph.
    """
    workflow = get_workflow()
    return {
        "diagram": workflow.get_graph_visualization(),
    }


@app.get("/stats", tags=["Debug"])
async def get_stats():
    """
    Get system statistics (for debugging/monitoring).
    """
    stats = {
        "active_sessions": get_session_service().get_active_session_count(),
    }

    try:
        stats["catalog"] = get_catalog_service().get_stats()
    except CatalogLoadError as e:
        stats["catalog"] = {"error": str(e)}

    return stats


# ============================================================
# Run with Uvicorn (for development)
# ============================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "righthome.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
