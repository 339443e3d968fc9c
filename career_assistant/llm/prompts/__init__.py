"""
Prompts module - Prompt assembly and offline reply templates.

Prompts are stored as separate Python files for:
- Version control of prompt changes
- Easy iteration on wording
- Clear documentation of prompt purpose
"""
from career_assistant.llm.prompts.system_prompts import (
    build_system_prompt,
    build_system_turn,
    relevant_history,
    build_live_turn,
    assemble_turns,
)
from career_assistant.llm.prompts.offline_responses import (
    OFFLINE_RULES,
    OfflineRequest,
    OfflineResponder,
    match_category,
)

__all__ = [
    "build_system_prompt",
    "build_system_turn",
    "relevant_history",
    "build_live_turn",
    "assemble_turns",
    "OFFLINE_RULES",
    "OfflineRequest",
    "OfflineResponder",
    "match_category",
]
