"""
Topic and goal extraction from message text.

Pure functions: no state, no I/O. Used to grow Memory.mentioned_topics
turn by turn and to summarize a batch of prior messages when memory is
loaded.
"""
import re
from typing import Iterable, List

TOPIC_KEYWORDS = (
    "career", "job", "profession", "skill", "education", "training",
    "university", "college", "degree", "certification", "experience",
    "interview", "resume", "portfolio", "networking", "salary",
    "industry", "company", "startup", "corporate", "freelance",
    "technology", "engineering", "marketing", "finance", "healthcare",
    "design", "art", "science", "research", "management", "leadership",
)

MAX_GOAL_LENGTH = 120

_GOAL_PATTERN = re.compile(
    r"\b(?:my (?:main |career |long[- ]term )?goal is (?:to )?"
    r"|i (?:really )?want to "
    r"|i'?d like to "
    r"|i would like to "
    r"|i hope to "
    r"|i plan to "
    r"|i'?m aiming to )"
    r"(?P<goal>[^.!?\n]+)",
    re.IGNORECASE,
)


def extract_topics(text: str) -> List[str]:
    """
    Keywords from the topic vocabulary found in text.

    Matching is a case-insensitive substring test, so "careers" yields
    "career". Results follow vocabulary order.
    """
    content = (text or "").lower()
    return [keyword for keyword in TOPIC_KEYWORDS if keyword in content]


def summarize_topics(texts: Iterable[str]) -> List[str]:
    """Ordered union of the topics found in a batch of messages."""
    topics: List[str] = []
    for text in texts:
        topics = merge_unique(topics, extract_topics(text))
    return topics


def extract_goals(text: str) -> List[str]:
    """
    Goals the user states in the message.

    >>> extract_goals("My goal is to become a data analyst. Any tips?")
    ['become a data analyst']
    """
    goals: List[str] = []
    for match in _GOAL_PATTERN.finditer(text or ""):
        goal = match.group("goal").strip(" ,;:")
        if not goal:
            continue
        goal = goal[:MAX_GOAL_LENGTH].rstrip()
        if goal.lower() not in (g.lower() for g in goals):
            goals.append(goal)
    return goals


def merge_unique(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Append items from new that are not already present, keeping order."""
    merged = list(existing)
    seen = set(merged)
    for item in new:
        if item not in seen:
            merged.append(item)
            seen.add(item)
    return merged
