"""
Conversation Memory - Data structures for turns and session memory.

This module provides:
- Turn: one role-tagged message in a conversation sequence
- Memory: the compact per-session summary stored in Session.context

Memory is a typed structure everywhere in the engine; it is turned into
JSON only by Memory.to_json() / Memory.from_json(), which the memory
store calls at the persistence edge. The JSON keys keep the camelCase
layout already used by stored session contexts.
"""
import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Dict, Any, Optional, Literal, Iterable

from career_assistant.core.exceptions import MalformedMemoryError

Role = Literal["user", "assistant", "system"]

DEFAULT_HISTORY_LIMIT = 15


@dataclass(frozen=True)
class Turn:
    """
    Represents a single turn in a conversation.

    Attributes:
        role: The role of the message sender (user, assistant, or system)
        content: The message content
        timestamp: When the turn happened, if known

    Example:
        >>> turn = Turn(role="user", content="How do I become a nurse?")
        >>> turn.to_dict()
        {'role': 'user', 'content': 'How do I become a nurse?'}
    """
    role: Role
    content: str
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, str]:
        """Convert to dict format for LLM API (role + content only)."""
        return {"role": self.role, "content": self.content}

    def to_full_dict(self) -> Dict[str, Any]:
        """Convert to full dict including timestamp."""
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Turn":
        """Build a Turn from its stored dict form."""
        role = data.get("role")
        content = data.get("content")
        if role not in ("user", "assistant", "system") or not isinstance(content, str):
            raise MalformedMemoryError(f"Invalid turn in stored history: {data!r:.80}")
        return cls(role=role, content=content, timestamp=_parse_timestamp(data.get("timestamp")))


@dataclass
class Memory:
    """
    Compact, bounded summary of a session used to bias future replies.

    Attributes:
        user_preferences: Free-form preferences supplied by the caller
        mentioned_topics: De-duplicated topic keywords, first-seen order
        user_goals: Goals the user has stated
        trimmed_history: Most recent turns, capped (oldest dropped first)
        personality_insights: Persona usage and other derived notes
        last_updated: When the memory was last saved
    """
    user_preferences: Dict[str, Any] = field(default_factory=dict)
    mentioned_topics: List[str] = field(default_factory=list)
    user_goals: List[str] = field(default_factory=list)
    trimmed_history: List[Turn] = field(default_factory=list)
    personality_insights: Dict[str, Any] = field(default_factory=dict)
    last_updated: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.user_preferences or self.mentioned_topics or self.user_goals
            or self.trimmed_history or self.personality_insights
        )

    def with_turns(self, turns: Iterable[Turn], limit: int = DEFAULT_HISTORY_LIMIT) -> "Memory":
        """
        Return a copy with turns appended to the trimmed history.

        The history is cut back to the `limit` most recent entries.
        """
        history = list(self.trimmed_history) + list(turns)
        if limit >= 0 and len(history) > limit:
            history = history[-limit:]
        return replace(self, trimmed_history=history)

    def to_dict(self) -> Dict[str, Any]:
        """Stored (camelCase) representation."""
        return {
            "userPreferences": self.user_preferences,
            "mentionedTopics": self.mentioned_topics,
            "userGoals": self.user_goals,
            "conversationHistory": [turn.to_full_dict() for turn in self.trimmed_history],
            "personalityInsights": self.personality_insights,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_dict(cls, data: Any) -> "Memory":
        """
        Build Memory from its stored dict.

        Missing keys default to empty; keys of the wrong type raise
        MalformedMemoryError.
        """
        if not isinstance(data, dict):
            raise MalformedMemoryError("Stored memory is not a JSON object")

        preferences = _expect(data, "userPreferences", dict, {})
        topics = _expect(data, "mentionedTopics", list, [])
        goals = _expect(data, "userGoals", list, [])
        history = _expect(data, "conversationHistory", list, [])
        insights = _expect(data, "personalityInsights", dict, {})

        for item in history:
            if not isinstance(item, dict):
                raise MalformedMemoryError("Stored history entry is not an object")

        return cls(
            user_preferences=dict(preferences),
            mentioned_topics=[str(topic) for topic in topics],
            user_goals=[str(goal) for goal in goals],
            trimmed_history=[Turn.from_dict(item) for item in history],
            personality_insights=dict(insights),
            last_updated=_parse_timestamp(data.get("lastUpdated")),
        )

    @classmethod
    def from_json(cls, blob: Optional[str]) -> "Memory":
        """
        Parse a session context blob.

        An empty blob is an empty Memory. Anything unparsable raises
        MalformedMemoryError.
        """
        if blob is None or not blob.strip():
            return cls()
        try:
            data = json.loads(blob)
        except (TypeError, ValueError) as e:
            raise MalformedMemoryError(f"Stored memory is not valid JSON: {e}") from e
        return cls.from_dict(data)


def _expect(data: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise MalformedMemoryError(f"Stored memory field '{key}' has the wrong type")
    return value


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        # Older blobs were written by JavaScript: 2025-01-01T10:00:00.000Z
        return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return None
