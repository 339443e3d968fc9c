"""
Career Tools - Templated document feedback and career roadmaps.

Neither tool calls a provider. Document feedback is chosen from the file
name (resume, cover letter, anything else); roadmaps are three fixed
phases framed by the caller's field, level and horizon.
"""
from typing import Dict, List, Tuple

from career_assistant.models.career import (
    CareerRoadmapRequest,
    CareerRoadmapResponse,
    DocumentAnalysisResponse,
    RoadmapPhase,
)

DEFAULT_TARGET_ROLE = "Senior Professional"

RESUME_FEEDBACK = (
    'I\'ve analyzed your resume "{file_name}" ({word_count} words). Based on the content, '
    "here are some observations and suggestions for improvement:\n\n"
    "• Consider highlighting quantifiable achievements\n"
    "• Ensure your skills section matches your target role\n"
    "• Review formatting for readability\n"
    "• Add relevant keywords for your industry\n\n"
    "Would you like specific feedback on any section?"
)

COVER_LETTER_FEEDBACK = (
    'I\'ve reviewed your cover letter "{file_name}" ({word_count} words). Here are some suggestions:\n\n'
    "• Customize it for each specific role\n"
    "• Show enthusiasm for the company\n"
    "• Connect your experience to their needs\n"
    "• Include a strong closing call-to-action\n\n"
    "Would you like help tailoring this for a specific position?"
)

DOCUMENT_FEEDBACK = (
    'I\'ve analyzed your document "{file_name}" ({word_count} words). This appears to be a '
    "career-related document. I can provide feedback on content structure, clarity, and "
    "professional presentation. What specific aspect would you like me to focus on?"
)

# (document type, file name markers, feedback template), first match wins
DOCUMENT_RULES: List[Tuple[str, Tuple[str, ...], str]] = [
    ("resume", ("resume", "cv"), RESUME_FEEDBACK),
    ("cover_letter", ("cover",), COVER_LETTER_FEEDBACK),
]

ROADMAP_PHASES: List[Dict] = [
    {
        "phase": "Foundation Building",
        "duration": "0-6 months",
        "focus": "Essential Skills & Knowledge",
        "tasks": [
            "Complete relevant online courses or certifications",
            "Build a professional portfolio/GitHub profile",
            "Network with professionals in your field",
            "Optimize LinkedIn profile and resume",
        ],
        "skills": ["Technical fundamentals", "Communication", "Problem-solving"],
        "milestones": ["Complete 2-3 key certifications", "Build 3-5 portfolio projects"],
    },
    {
        "phase": "Skill Development",
        "duration": "6-18 months",
        "focus": "Practical Experience & Specialization",
        "tasks": [
            "Gain hands-on experience through projects/internships",
            "Choose a specialization area",
            "Contribute to open-source projects",
            "Attend industry events and conferences",
        ],
        "skills": ["Advanced technical skills", "Project management", "Leadership"],
        "milestones": ["Land first relevant position", "Complete major project"],
    },
    {
        "phase": "Professional Growth",
        "duration": "18+ months",
        "focus": "Leadership & Expertise",
        "tasks": [
            "Take on leadership responsibilities",
            "Mentor junior colleagues",
            "Develop strategic thinking skills",
            "Build industry reputation",
        ],
        "skills": ["Team leadership", "Strategic planning", "Industry expertise"],
        "milestones": ["Promotion to senior role", "Industry recognition"],
    },
]

RECOMMENDATIONS = [
    "Focus on continuous learning and skill development",
    "Build a strong professional network in your field",
    "Seek mentorship from experienced professionals",
    "Document your achievements and learnings",
    "Stay updated with industry trends and technologies",
]

RESOURCES = [
    "Online learning platforms (Coursera, Udemy, LinkedIn Learning)",
    "Professional associations and communities",
    "Industry publications and blogs",
    "Networking events and conferences",
    "Career coaching and mentorship programs",
]


def classify_document(file_name: str) -> Tuple[str, str]:
    """Document type and feedback template for a file name."""
    lowered = (file_name or "").lower()
    for doc_type, markers, template in DOCUMENT_RULES:
        if any(marker in lowered for marker in markers):
            return doc_type, template
    return "document", DOCUMENT_FEEDBACK


def analyze_document(content: str, file_name: str) -> DocumentAnalysisResponse:
    """
    Feedback on an uploaded document.

    Example:
        >>> analyze_document("Nurse with 5 years on ICU wards", "my_resume.txt").document_type
        'resume'
    """
    doc_type, template = classify_document(file_name)
    word_count = len(content.split())
    return DocumentAnalysisResponse(
        file_name=file_name,
        document_type=doc_type,
        word_count=word_count,
        analysis=template.format(file_name=file_name, word_count=word_count),
    )


def field_label(career_field: str) -> str:
    return career_field.replace("_", " ").title()


def build_career_roadmap(request: CareerRoadmapRequest) -> CareerRoadmapResponse:
    """Three-phase roadmap framed by the request's field, level and horizon."""
    return CareerRoadmapResponse(
        title=f"Your Personalized {field_label(request.career_field)} Career Roadmap",
        timeline=f"{request.timeline_months} months",
        current_level=request.experience_level,
        target_role=request.target_role or DEFAULT_TARGET_ROLE,
        phases=[RoadmapPhase(**phase) for phase in ROADMAP_PHASES],
        recommendations=list(RECOMMENDATIONS),
        resources=list(RESOURCES),
    )
