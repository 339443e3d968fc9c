"""
Conversation Prompts - System instruction block and turn assembly.

This module builds the turn list sent to a provider:
1. One system turn: persona, guidelines, caller profile, memory
2. A short slice of remembered history
3. The stored prior turns of the session
4. The live user message
"""
import json
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from career_assistant.llm.personas import Persona
from career_assistant.memory.conversation import Memory, Turn
from career_assistant.models.chat import ChatContext

RECENT_TOPICS_IN_PROMPT = 5
DEFAULT_HISTORY_TURNS = 6

GUIDELINES = """Key Guidelines:
- Provide personalized, actionable career advice
- Be encouraging and supportive
- Ask clarifying questions to better understand goals
- Reference relevant career paths, skills, and opportunities
- Suggest assessments, mentorship, and resources when appropriate
- Maintain consistency with your established personality"""


def build_system_prompt(
    persona: Persona,
    context: Optional[ChatContext] = None,
    memory: Optional[Memory] = None
) -> str:
    """
    Get the system instruction block.

    Args:
        persona: Persona selected for this turn
        context: Optional caller context (profile, assessments, goals)
        memory: Session memory, if any

    Returns:
        Complete system prompt text
    """
    sections = [
        f"You are {persona.name}, an expert career counselor AI assistant.\n\n"
        f"Personality Traits: {', '.join(persona.traits)}\n"
        f"Response Style: {persona.response_style}\n"
        f"Specializations: {', '.join(persona.specializations)}",
        GUIDELINES,
    ]

    if context is not None:
        profile_lines = _profile_lines(context)
        if profile_lines:
            sections.append("User Profile Context:\n" + "\n".join(profile_lines))

        if context.previous_assessments:
            lines = [
                f"- Assessment {i}: {assessment.type or 'assessment'} - Score: {_format_score(assessment.score)}"
                for i, assessment in enumerate(context.previous_assessments, start=1)
            ]
            sections.append("Previous Assessment Results:\n" + "\n".join(lines))

    if memory is not None:
        if memory.mentioned_topics:
            recent = memory.mentioned_topics[-RECENT_TOPICS_IN_PROMPT:]
            sections.append(f"Previously Discussed Topics: {', '.join(recent)}")
        if memory.user_goals:
            sections.append(f"User's Goals: {', '.join(memory.user_goals)}")
        if memory.user_preferences:
            sections.append(f"User Preferences: {json.dumps(memory.user_preferences, default=str)}")

    return "\n\n".join(sections)


def build_system_turn(
    persona: Persona,
    context: Optional[ChatContext] = None,
    memory: Optional[Memory] = None
) -> Turn:
    """The system prompt as a Turn."""
    return Turn(role="system", content=build_system_prompt(persona, context, memory))


def relevant_history(
    memory: Optional[Memory],
    limit: int = DEFAULT_HISTORY_TURNS,
    exclude: Iterable[Turn] = ()
) -> List[Turn]:
    """
    Last `limit` non-system turns of the memory history, oldest first.

    The window is taken first. Turns inside it whose role and content
    also appear in `exclude` are then dropped, newest first and one per
    excluded occurrence, so an exchange is never replayed twice and
    nothing older than the window takes its place.
    """
    if memory is None or not memory.trimmed_history or limit <= 0:
        return []

    window = [turn for turn in memory.trimmed_history if turn.role != "system"][-limit:]
    pending = Counter((turn.role, turn.content) for turn in exclude)

    kept: List[Turn] = []
    for turn in reversed(window):
        key = (turn.role, turn.content)
        if pending[key] > 0:
            pending[key] -= 1
            continue
        kept.append(Turn(role=turn.role, content=turn.content))
    kept.reverse()
    return kept


def build_live_turn(message: str, context: Optional[ChatContext] = None) -> Turn:
    """
    The live user turn.

    Example:
        >>> ctx = ChatContext(context_prompt="I am on the nursing roadmap page.")
        >>> build_live_turn("What next?", ctx).content
        'I am on the nursing roadmap page.\\n\\nUser Question: What next?'
    """
    if context is not None and context.context_prompt:
        return Turn(role="user", content=f"{context.context_prompt}\n\nUser Question: {message}")
    return Turn(role="user", content=message)


def assemble_turns(
    persona: Persona,
    message: str,
    prior_turns: Sequence[Turn] = (),
    context: Optional[ChatContext] = None,
    memory: Optional[Memory] = None,
    history_limit: int = DEFAULT_HISTORY_TURNS
) -> List[Turn]:
    """
    Full turn list for a provider call.

    Order: system, remembered history, prior session turns, live message.
    """
    prior = [turn for turn in prior_turns if turn.role != "system"]
    return [
        build_system_turn(persona, context, memory),
        *relevant_history(memory, history_limit, exclude=prior),
        *prior,
        build_live_turn(message, context),
    ]


def _profile_lines(context: ChatContext) -> List[str]:
    lines = []
    profile = context.user_profile
    if profile is not None:
        if profile.education_level:
            lines.append(f"- Education Level: {profile.education_level}")
        if profile.interests:
            lines.append(f"- Interests: {', '.join(profile.interests)}")

    goals = []
    if profile is not None:
        goals = profile.current_goals or profile.career_goals
    goals = goals or context.current_goals
    if goals:
        lines.append(f"- Current Goals: {', '.join(goals)}")
    return lines


def _format_score(score: Optional[float]) -> str:
    if score is None:
        return "n/a"
    return f"{score:g}"
