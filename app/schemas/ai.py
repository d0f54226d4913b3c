"""
Pydantic schemas for AI endpoints.
"""
from typing import Optional, List
from pydantic import Field

from app.schemas.common import CamelModel


class InterviewQuestionsRequest(CamelModel):
    """
    Either an applicationId (stored AI strengths/weaknesses are used) or explicit job and analysis fields.
    """
    application_id: Optional[str] = Field(None, description="Application whose AI analysis drives the questions")
    job_title: Optional[str] = Field(None, description="Job title")
    job_description: Optional[str] = Field(None, description="Job description")
    candidate_strengths: List[str] = Field(default_factory=list)
    candidate_weaknesses: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "jobTitle": "Senior Platform Engineer",
                "jobDescription": "Own our Kubernetes platform...",
                "candidateStrengths": ["Deep Kubernetes operations experience"],
                "candidateWeaknesses": ["Limited Terraform exposure"]
            }
        }


class InterviewQuestionsResponse(CamelModel):
    technical_questions: List[str]
    behavioral_questions: List[str]
    situational_questions: List[str]


class JobDescriptionRequest(CamelModel):
    job_title: str = Field(..., min_length=1)
    platform: str = Field(..., min_length=1)
    technologies: str = Field(..., min_length=1, description="Comma-separated technologies")
    modules: Optional[str] = None
    experience_level: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    contract_type: Optional[str] = None
    key_responsibilities_summary: str = Field(..., min_length=1)
    company_culture_snippet: Optional[str] = None


class JobDescriptionResponse(CamelModel):
    generated_description: str
