"""
Request and Response models for the career tools endpoints.

POST /chat/career-roadmap takes a CareerRoadmapRequest and answers with a
CareerRoadmapResponse; POST /chat/analyze-document answers with a
DocumentAnalysisResponse.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

CareerField = Literal[
    "technology", "healthcare", "finance", "education", "marketing",
    "design", "business", "science", "engineering", "arts", "other",
]
ExperienceLevel = Literal["beginner", "intermediate", "advanced", "expert"]
WorkStyle = Literal["remote", "hybrid", "on_site", "flexible"]


class CareerRoadmapRequest(BaseModel):
    """
    Preferences for a generated career roadmap.

    Attributes:
        career_field: Field the roadmap is for
        experience_level: Where the user is today
        timeline_months: Horizon of the roadmap, 1 to 120 months
        target_role: Role to aim for; a senior role in the field if omitted
    """
    career_field: CareerField
    experience_level: ExperienceLevel
    timeline_months: int = Field(..., ge=1, le=120)
    skills: List[str] = Field(default_factory=list)
    work_style: Optional[WorkStyle] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    target_role: Optional[str] = Field(default=None, max_length=255)
    additional_notes: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def check_salary_range(self) -> "CareerRoadmapRequest":
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min cannot exceed salary_max")
        return self


class RoadmapPhase(BaseModel):
    """One stage of a roadmap."""
    phase: str
    duration: str
    focus: str
    tasks: List[str]
    skills: List[str]
    milestones: List[str]


class CareerRoadmapResponse(BaseModel):
    """A staged plan from the current level to the target role."""
    title: str
    timeline: str
    current_level: str
    target_role: str
    phases: List[RoadmapPhase]
    recommendations: List[str]
    resources: List[str]


class DocumentAnalysisResponse(BaseModel):
    """Feedback on an uploaded career document."""
    file_name: str
    document_type: Literal["resume", "cover_letter", "document"]
    word_count: int
    analysis: str
