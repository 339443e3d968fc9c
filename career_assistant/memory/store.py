"""
Memory Store - Load and save the per-session Memory record.

The memory lives inside the session's free-form context field as JSON.
This module is the only place that crosses that boundary:
- load(): context blob -> Memory (corrupt memory is masked, never fatal)
- save(): Memory -> context blob (best-effort, failures are swallowed)
- update(): fold one finished exchange into Memory, then save

Everything above this layer works with the typed Memory structure.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from career_assistant.core.exceptions import MalformedMemoryError, PersistenceError
from career_assistant.core.logging_config import get_logger
from career_assistant.database.repository import SessionRepository, MessageRepository
from career_assistant.memory.conversation import Memory, Turn, DEFAULT_HISTORY_LIMIT
from career_assistant.memory.topics import (
    extract_topics,
    extract_goals,
    summarize_topics,
    merge_unique,
)

logger = get_logger(__name__)

MAX_GOALS = 10


class MemoryStore:
    """
    Adapter between Memory and the session store.

    Example:
        >>> store = MemoryStore(sessions, messages)
        >>> memory = store.load(session_id)
        >>> store.update(session_id, memory, "I want to become a nurse", reply, "mentor")
        True
    """

    def __init__(
        self,
        sessions: SessionRepository,
        messages: MessageRepository,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        scan_limit: int = 20
    ):
        """
        Args:
            sessions: Session store holding the context blob
            messages: Message log scanned for topics on load
            history_limit: Cap on Memory.trimmed_history
            scan_limit: How many recent messages to scan for topics
        """
        self.sessions = sessions
        self.messages = messages
        self.history_limit = history_limit
        self.scan_limit = scan_limit

    def load(self, session_id: str) -> Optional[Memory]:
        """
        Load the Memory for a session.

        Returns:
            The session's Memory (empty if the stored blob is empty or
            corrupt), or None if the session cannot be found or read.
        """
        try:
            record = self.sessions.find(session_id)
        except PersistenceError as e:
            logger.error(f"Memory load failed for session {session_id}: {e}")
            return None

        if record is None:
            logger.debug(f"No session {session_id}, no memory to load")
            return None

        try:
            memory = Memory.from_json(record.context)
        except MalformedMemoryError as e:
            logger.warning(f"Masking corrupt memory for session {session_id}: {e.message}")
            memory = Memory()

        try:
            recent = self.messages.recent(session_id, self.scan_limit)
        except PersistenceError as e:
            logger.warning(f"Topic scan skipped for session {session_id}: {e}")
            recent = []

        if recent:
            scanned = summarize_topics(message.content for message in recent)
            memory.mentioned_topics = merge_unique(memory.mentioned_topics, scanned)

        return memory

    def save(self, session_id: str, memory: Memory) -> bool:
        """
        Write Memory back to the session, stamped with the current time.

        Returns:
            True if written. Failures are logged and return False.
        """
        memory.last_updated = datetime.utcnow()
        try:
            written = self.sessions.update_context(session_id, memory.to_json())
        except PersistenceError as e:
            logger.error(f"Memory save failed for session {session_id}: {e}")
            return False

        if not written:
            logger.warning(f"Memory not saved, session {session_id} is gone")
        return written

    def update(
        self,
        session_id: str,
        memory: Optional[Memory],
        user_message: str,
        reply: str,
        persona: str,
        preferences: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Fold one exchange into the session's memory and save it.

        Merges topics and goals found in the user message, caller
        preferences and persona usage, then appends the user and
        assistant turns to the trimmed history.
        """
        memory = memory or Memory()
        now = datetime.utcnow()

        memory.mentioned_topics = merge_unique(memory.mentioned_topics, extract_topics(user_message))

        goals = merge_unique(memory.user_goals, extract_goals(user_message))
        memory.user_goals = goals[-MAX_GOALS:]

        if preferences:
            memory.user_preferences = {**memory.user_preferences, **preferences}

        insights = dict(memory.personality_insights)
        counts = dict(insights.get("personaCounts") or {})
        counts[persona] = counts.get(persona, 0) + 1
        insights["personaCounts"] = counts
        insights["lastPersona"] = persona
        memory.personality_insights = insights

        memory = memory.with_turns(
            [
                Turn(role="user", content=user_message, timestamp=now),
                Turn(role="assistant", content=reply, timestamp=now),
            ],
            limit=self.history_limit,
        )

        return self.save(session_id, memory)
