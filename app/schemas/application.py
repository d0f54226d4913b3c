"""
Pydantic schemas for application endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import Field

from app.schemas.common import CamelModel


class ApplyOneClickRequest(CamelModel):
    job_id: str = Field(..., min_length=1, description="Job to apply for")
    candidate_id: str = Field(..., min_length=1, description="Applying candidate")


class UpdateStatusRequest(CamelModel):
    application_id: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1, description="One of Applied, Under Review, Interviewing, Offer Extended, Rejected")
    recruiter_id: str = Field(..., min_length=1)


class WithdrawRequest(CamelModel):
    application_id: str = Field(..., min_length=1)
    candidate_id: str = Field(..., min_length=1)


class ApplicationResponse(CamelModel):
    """Application as shown to candidates and recruiters."""
    id: str
    candidate_id: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_id: str
    job_title: str
    recruiter_id: str
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    cv_url: Optional[str] = None
    cv_public_id: Optional[str] = None
    applied_at: Optional[datetime] = None
    status: str
    ai_score: Optional[int] = None
    ai_analysis_summary: Optional[str] = None
    ai_strengths: List[str] = Field(default_factory=list)
    ai_weaknesses: List[str] = Field(default_factory=list)


class ApplySuccessResponse(CamelModel):
    success: bool = True
    message: str = "Application submitted successfully."
    application_id: str
    ai_score: Optional[int] = None


class ApplicationListResponse(CamelModel):
    applications: List[ApplicationResponse]
    total: int
