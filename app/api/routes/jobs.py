"""
Job board endpoints.

Listing and detail views are public; posting requires a recruiter session and
one job post credit.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.job import JobCreate, JobResponse, JobListResponse, JobCreatedResponse
from app.services import job_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobCreatedResponse)
def create_job(
    job_data: JobCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Post a new job.

    Uses a free post first, then a purchased one; 402 when none are left.
    """
    job = job_service.create_job(db, user, job_data)
    return JobCreatedResponse(
        job=JobResponse.from_job(job),
        free_posts_remaining=user.free_posts_remaining,
        purchased_posts_remaining=user.purchased_posts_remaining,
    )


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: Optional[str] = Query(None, description="Search in title, description, technologies and company"),
    platform: Optional[str] = Query(None, description="Filter by platform (partial match)"),
    experience_level: Optional[str] = Query(None, alias="experienceLevel", description="Entry, Mid or Senior"),
    contract_type: Optional[str] = Query(None, alias="contractType", description="Full-time, Part-time or Contract"),
    location: Optional[str] = Query(None, description="Filter by location (partial match)"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
    db: Session = Depends(get_db)
):
    jobs, total = job_service.list_jobs(
        db,
        search=search,
        platform=platform,
        experience_level=experience_level,
        contract_type=contract_type,
        location=location,
        page=page,
        page_size=page_size,
    )
    logger.debug(f"Jobs listed: total={total}, page={page}")
    return JobListResponse(
        jobs=[JobResponse.from_job(job) for job in jobs],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/mine", response_model=JobListResponse)
def list_my_jobs(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Jobs posted by the authenticated recruiter."""
    jobs = job_service.list_recruiter_jobs(db, user.id)
    return JobListResponse(
        jobs=[JobResponse.from_job(job) for job in jobs],
        total=len(jobs),
        page=1,
        page_size=max(len(jobs), 1)
    )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    return JobResponse.from_job(job_service.get_job(db, job_id))
