"""
Pydantic schemas for job endpoints.
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import Field

from app.schemas.common import CamelModel

ContractType = Literal["Full-time", "Part-time", "Contract"]
ExperienceLevel = Literal["Entry", "Mid", "Senior"]


class JobCreate(CamelModel):
    """Schema for posting a new job."""
    title: str = Field(..., description="Job title", min_length=1, max_length=255)
    description: str = Field(..., description="Full job description", min_length=1)
    platform: str = Field(..., description="Primary platform, e.g. Kubernetes, AWS, GCP", min_length=1)
    technologies: List[str] = Field(default_factory=list, description="Key technologies")
    modules: Optional[str] = Field(None, description="Specific modules or components")
    location: str = Field(..., description="Location or 'Remote'", min_length=1)
    contract_type: ContractType = Field(..., description="Contract type")
    experience_level: ExperienceLevel = Field(..., description="Required experience level")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Senior Platform Engineer",
                "description": "Own our Kubernetes platform...",
                "platform": "Kubernetes",
                "technologies": ["Kubernetes", "Terraform", "AWS"],
                "location": "Remote",
                "contractType": "Full-time",
                "experienceLevel": "Senior"
            }
        }


class JobResponse(CamelModel):
    """Schema for job response."""
    id: str = Field(..., description="Job ID")
    recruiter_id: str = Field(..., description="Recruiter who posted this job")
    title: str
    description: str
    platform: str
    technologies: List[str] = Field(default_factory=list)
    modules: Optional[str] = None
    location: str
    contract_type: str
    experience_level: str
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    company_website: Optional[str] = None
    application_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_job(cls, job) -> "JobResponse":
        """Build from an ORM Job, splitting the comma-joined technologies column."""
        data = {
            column: getattr(job, column)
            for column in cls.model_fields
            if column != "technologies"
        }
        data["technologies"] = [t for t in (job.technologies or "").split(",") if t]
        return cls(**data)


class JobListResponse(CamelModel):
    """Schema for list of jobs response."""
    jobs: List[JobResponse] = Field(..., description="List of jobs")
    total: int = Field(..., description="Total number of jobs")
    page: int = Field(1, description="Current page number")
    page_size: int = Field(20, description="Number of items per page")


class JobCreatedResponse(CamelModel):
    success: bool = True
    job: JobResponse
    free_posts_remaining: int
    purchased_posts_remaining: int
