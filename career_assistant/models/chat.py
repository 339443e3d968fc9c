"""
Request and Response models for the Chat API.

These Pydantic models define the contract between client and server.
They provide:
- Type validation
- Automatic documentation
- Request/response serialization

ChatContext is also the optional caller context handed to the engine.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field

ProviderToken = Literal["deepseek", "gpt-oss", "openai", "anthropic", "auto"]


class UserProfile(BaseModel):
    """Profile facts the caller already knows about the user."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    education_level: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    career_goals: List[str] = Field(default_factory=list)
    current_goals: List[str] = Field(default_factory=list)
    experience_level: Optional[str] = None


class AssessmentSummary(BaseModel):
    """A completed assessment, reduced to what the prompt needs."""
    assessment_id: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Assessment type, e.g. 'personality'")
    score: Optional[float] = None
    completed_at: Optional[datetime] = None


class ChatContext(BaseModel):
    """
    Optional caller-supplied context for a message.

    Attributes:
        user_profile: Known profile facts
        previous_assessments: Completed assessments with scores
        current_goals: Goals the caller wants the assistant to keep in mind
        context_prompt: Text prepended to the user's question
        preferences: Free-form preferences, merged into session memory
        current_page: Page of the client app the message came from
    """
    user_profile: Optional[UserProfile] = None
    previous_assessments: List[AssessmentSummary] = Field(default_factory=list)
    current_goals: List[str] = Field(default_factory=list)
    context_prompt: Optional[str] = None
    preferences: Dict[str, Any] = Field(default_factory=dict)
    current_page: Optional[str] = None

    @property
    def first_name(self) -> Optional[str]:
        return self.user_profile.first_name if self.user_profile else None


class SendMessageRequest(BaseModel):
    """
    Request model for POST /chat/message.

    Attributes:
        message: The user's message
        session_id: Session to continue; a new one is created if omitted or unknown
        preferred_provider: Provider to use instead of the automatic order
        context: Optional caller context
    """
    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="The user's message",
        examples=["I'm curious about machine learning careers"]
    )
    session_id: Optional[str] = Field(
        default=None,
        description="Session ID for multi-turn conversations"
    )
    preferred_provider: Optional[ProviderToken] = Field(
        default=None,
        description="deepseek, gpt-oss, openai, anthropic or auto"
    )
    context: Optional[ChatContext] = None


class CreateSessionRequest(BaseModel):
    """Request model for POST /chat/sessions."""
    title: Optional[str] = Field(default=None, max_length=255)
    context: Optional[str] = Field(default=None, max_length=2000)


class ChatMessageResponse(BaseModel):
    """
    A stored chat message.

    `provider` is set on assistant replies: the provider name that
    produced the text, or "offline" for a templated reply.
    """
    id: int
    session_id: str
    role: Literal["user", "assistant", "system"]
    content: str
    created_at: datetime
    provider: Optional[str] = None
    persona: Optional[str] = None
    degraded: bool = False


class ChatSessionResponse(BaseModel):
    """A chat session with its message stats."""
    id: str
    title: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    message_count: int = 0
    last_message: Optional[ChatMessageResponse] = None


class SessionDeleteResponse(BaseModel):
    """Response for session deletion."""
    session_id: str
    deleted: bool = True
    message: str = Field(default="Session deleted")


class HealthResponse(BaseModel):
    """Response model for the /health endpoints."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database: Optional[str] = None
    providers: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
