"""
Session management service for maintaining buyer state across requests.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..config import get_settings
from ..models.listing import ListingRecord
from ..models.state import ConversationStage, RequirementProfile

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hi, I'm your property co-pilot. Looking for a home or investment? "
    "I'll help you shortlist the best ones and book visits too."
)


@dataclass
class SessionData:
    """Data structure for a buyer session."""

    session_id: str
    created_at: datetime = field(default_factory=datetime.now)
    last_accessed: datetime = field(default_factory=datetime.now)
    profile: RequirementProfile = field(default_factory=RequirementProfile)
    stage: int = int(ConversationStage.GREETING)
    history: List[Dict[str, str]] = field(default_factory=list)
    last_recommendations: List[ListingRecord] = field(default_factory=list)
    history_limit: int = 50

    def touch(self):
        """Update last accessed time."""
        self.last_accessed = datetime.now()

    def add_to_history(self, role: str, content: str):
        """Add a message to conversation history."""
        self.history.append({
            "role": role,
            "content": content,
            "timestamp": datetime.now().isoformat()
        })
        # Keep history manageable
        if len(self.history) > self.history_limit:
            self.history = self.history[-self.history_limit:]

    def apply_turn(
        self,
        profile: Dict[str, Any],
        stage: int,
        recommendations: Optional[List[ListingRecord]] = None
    ):
        """
        Store the snapshot produced by a turn.

        Recommendations are only replaced when the turn showed some, so the
        shortlist survives turns that don't display listings. An empty
        profile (after a reset) drops the shortlist.
        """
        self.profile = RequirementProfile(**profile)
        self.stage = stage
        if recommendations:
            self.last_recommendations = list(recommendations)
        elif not profile:
            self.last_recommendations = []

    def to_dict(self) -> Dict[str, Any]:
        """Convert session to dictionary."""
        return {
            "session_id": self.session_id,
            "created_at": self.created_at.isoformat(),
            "last_accessed": self.last_accessed.isoformat(),
            "profile": dict(self.profile),
            "stage": self.stage,
            "history": self.history,
            "last_recommendations": [listing.id for listing in self.last_recommendations],
        }


class SessionService:
    """
    Service for managing buyer sessions.

    Maintains session data in memory with optional cleanup of stale sessions.
    For production, this should be replaced with Redis or a database.
    """

    def __init__(self, session_timeout_hours: int = 24, history_limit: int = 50):
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()
        self._session_timeout = timedelta(hours=session_timeout_hours)
        self._history_limit = history_limit

    def get_or_create_session(self, session_id: str) -> SessionData:
        """
        Get existing session or create a new one.

        New sessions start with the welcome message in their history.

        Args:
            session_id: Session identifier

        Returns:
            SessionData object
        """
        with self._lock:
            if session_id not in self._sessions:
                session = SessionData(session_id=session_id, history_limit=self._history_limit)
                session.add_to_history("assistant", WELCOME_MESSAGE)
                self._sessions[session_id] = session
                logger.info(f"Created session {session_id}")

            session = self._sessions[session_id]
            session.touch()
            return session

    def get_session(self, session_id: str) -> Optional[SessionData]:
        """
        Get existing session if it exists.

        Args:
            session_id: Session identifier

        Returns:
            SessionData or None
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session:
                session.touch()
            return session

    def delete_session(self, session_id: str) -> bool:
        """
        Delete a session.

        Args:
            session_id: Session identifier

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                return True
            return False

    def cleanup_stale_sessions(self) -> int:
        """
        Remove sessions that have been inactive for too long.

        Returns:
            Number of sessions removed
        """
        now = datetime.now()
        removed = 0

        with self._lock:
            stale_ids = [
                sid for sid, session in self._sessions.items()
                if now - session.last_accessed > self._session_timeout
            ]

            for sid in stale_ids:
                del self._sessions[sid]
                removed += 1

        if removed:
            logger.info(f"Removed {removed} stale sessions")
        return removed

    def get_active_session_count(self) -> int:
        """Get the number of active sessions."""
        with self._lock:
            return len(self._sessions)

    def add_to_history(
        self,
        session_id: str,
        user_message: str,
        assistant_response: str
    ):
        """
        Add a conversation exchange to session history.

        Args:
            session_id: Session identifier
            user_message: Buyer's message
            assistant_response: Assistant's response
        """
        session = self.get_or_create_session(session_id)
        session.add_to_history("user", user_message)
        session.add_to_history("assistant", assistant_response)

    def get_history(
        self,
        session_id: str,
        limit: int = 10
    ) -> List[Dict[str, str]]:
        """
        Get conversation history for a session.

        Args:
            session_id: Session identifier
            limit: Maximum number of messages to return

        Returns:
            List of conversation messages
        """
        session = self.get_session(session_id)
        if session:
            return session.history[-limit:]
        return []


# Singleton instance
_session_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """
    Get or create the session service singleton.

    Returns:
        SessionService instance
    """
    global _session_service

    if _session_service is None:
        settings = get_settings()
        _session_service = SessionService(
            session_timeout_hours=settings.SESSION_TIMEOUT_HOURS,
            history_limit=settings.HISTORY_LIMIT,
        )

    return _session_service
