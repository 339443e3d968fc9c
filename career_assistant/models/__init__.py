"""
Models module - Pydantic schemas for data validation.

This module defines:
- Request models: Input validation for API endpoints
- Response models: Output formatting for API responses
- ChatContext: caller context passed from the API into the engine
- Career tool models: roadmap preferences and document feedback
"""
from career_assistant.models.chat import (
    ProviderToken,
    UserProfile,
    AssessmentSummary,
    ChatContext,
    SendMessageRequest,
    CreateSessionRequest,
    ChatMessageResponse,
    ChatSessionResponse,
    SessionDeleteResponse,
    HealthResponse,
    ErrorResponse,
)
from career_assistant.models.career import (
    CareerRoadmapRequest,
    RoadmapPhase,
    CareerRoadmapResponse,
    DocumentAnalysisResponse,
)

__all__ = [
    "ProviderToken",
    "UserProfile",
    "AssessmentSummary",
    "ChatContext",
    "SendMessageRequest",
    "CreateSessionRequest",
    "ChatMessageResponse",
    "ChatSessionResponse",
    "SessionDeleteResponse",
    "HealthResponse",
    "ErrorResponse",
    "CareerRoadmapRequest",
    "RoadmapPhase",
    "CareerRoadmapResponse",
    "DocumentAnalysisResponse",
]
