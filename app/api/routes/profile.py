"""
Profile endpoints for the authenticated user, including candidate saved jobs.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.job import JobResponse, JobListResponse
from app.schemas.profile import ProfileUpdate, ProfileResponse
from app.services import profile_service

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user_obj)):
    return ProfileResponse.model_validate(user)


@router.put("", response_model=ProfileResponse)
def update_profile(
    update: ProfileUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Update role-specific profile fields; only the fields sent are changed."""
    return ProfileResponse.model_validate(profile_service.update_profile(db, user, update))


@router.get("/saved-jobs", response_model=JobListResponse)
def list_saved_jobs(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    jobs = profile_service.list_saved_jobs(db, user)
    return JobListResponse(
        jobs=[JobResponse.from_job(job) for job in jobs],
        total=len(jobs),
        page=1,
        page_size=max(len(jobs), 1)
    )


@router.post("/saved-jobs/{job_id}")
def save_job(
    job_id: str,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return {"success": True, "savedJobs": profile_service.save_job(db, user, job_id)}


@router.delete("/saved-jobs/{job_id}")
def unsave_job(
    job_id: str,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return {"success": True, "savedJobs": profile_service.unsave_job(db, user, job_id)}
