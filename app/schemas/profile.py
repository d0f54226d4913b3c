"""
Pydantic schemas for profile endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import Field

from app.schemas.common import CamelModel


class WorkExperienceEntry(CamelModel):
    title: str
    company: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


class EducationEntry(CamelModel):
    institution: str
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class ProfileUpdate(CamelModel):
    """
    Partial profile update. Only fields that are sent are changed.

    Company fields apply to recruiters, the rest to candidates; fields for the
    other role are rejected by the profile service.
    The stored CV text is not client-writable; it is only ever extracted from
    the CV file on the server.
    """
    display_name: Optional[str] = Field(None, max_length=200)

    company_name: Optional[str] = Field(None, max_length=255)
    company_website: Optional[str] = None
    company_description: Optional[str] = None
    company_logo_url: Optional[str] = None
    company_logo_public_id: Optional[str] = None

    phone_number: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    headline: Optional[str] = Field(None, max_length=255)
    summary: Optional[str] = None
    skills: Optional[List[str]] = None
    work_experience: Optional[List[WorkExperienceEntry]] = None
    education: Optional[List[EducationEntry]] = None
    cv_url: Optional[str] = None
    cv_public_id: Optional[str] = None
    cv_mime_type: Optional[str] = None
    cv_file_name: Optional[str] = None


class ProfileResponse(CamelModel):
    """Full profile of the authenticated user."""
    id: str
    email: str
    display_name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    company_name: Optional[str] = None
    company_website: Optional[str] = None
    company_description: Optional[str] = None
    company_logo_url: Optional[str] = None

    phone_number: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    headline: Optional[str] = None
    summary: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    work_experience: List[WorkExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    cv_url: Optional[str] = None
    cv_mime_type: Optional[str] = None
    cv_file_name: Optional[str] = None

    free_posts_remaining: int = 0
    purchased_posts_remaining: int = 0
    saved_jobs: List[str] = Field(default_factory=list)
