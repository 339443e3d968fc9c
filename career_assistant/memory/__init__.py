"""
Memory Package - Per-session memory for the assistant.

- Turn / Memory: typed memory record and its JSON form
- topics: keyword and goal extraction from message text
- MemoryStore: load/save Memory inside the session context field

Example:
    >>> from career_assistant.memory import extract_topics
    >>> extract_topics("Any salary tips for a design job?")
    ['job', 'salary', 'design']
"""
from career_assistant.memory.conversation import Turn, Memory, DEFAULT_HISTORY_LIMIT
from career_assistant.memory.topics import (
    TOPIC_KEYWORDS,
    extract_topics,
    summarize_topics,
    extract_goals,
    merge_unique,
)
from career_assistant.memory.store import MemoryStore

__all__ = [
    # Types
    "Turn",
    "Memory",
    "DEFAULT_HISTORY_LIMIT",
    # Topics
    "TOPIC_KEYWORDS",
    "extract_topics",
    "summarize_topics",
    "extract_goals",
    "merge_unique",
    # Store
    "MemoryStore",
]
