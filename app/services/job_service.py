"""
Job posting service: credit consumption, listing and lookup.

Recruiters spend one credit per posted job, free allotment first, then
purchased posts.
"""
import logging
from typing import Optional, List, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, PaymentRequired
from app.db.models.job import Job
from app.db.models.user import User
from app.schemas.job import JobCreate

logger = logging.getLogger(__name__)

NO_CREDITS_MESSAGE = "No job posts remaining. Please purchase more job posts."


def consume_job_credit(user: User) -> str:
    """
    Take one job post credit from the recruiter (not committed).

    Returns:
        "free" or "purchased", the pool the credit came from

    Raises:
        PaymentRequired: no credits left in either pool
    """
    if (user.free_posts_remaining or 0) > 0:
        user.free_posts_remaining -= 1
        return "free"
    if (user.purchased_posts_remaining or 0) > 0:
        user.purchased_posts_remaining -= 1
        return "purchased"
    raise PaymentRequired(NO_CREDITS_MESSAGE)


def create_job(db: Session, recruiter: User, job_data: JobCreate) -> Job:
    """
    Post a job for a recruiter. Company fields are copied from the recruiter profile.

    Raises:
        Forbidden: caller is not a recruiter
        PaymentRequired: no job post credits left
    """
    if not recruiter.is_recruiter:
        raise Forbidden("Only recruiters can post jobs.")

    pool = consume_job_credit(recruiter)

    job = Job(
        recruiter_id=recruiter.id,
        title=job_data.title.strip(),
        description=job_data.description,
        platform=job_data.platform.strip(),
        technologies=",".join(t.strip() for t in job_data.technologies if t.strip()),
        modules=job_data.modules,
        location=job_data.location.strip(),
        contract_type=job_data.contract_type,
        experience_level=job_data.experience_level,
        company_name=recruiter.company_name,
        company_logo_url=recruiter.company_logo_url,
        company_website=recruiter.company_website,
    )
    db.add(job)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(job)

    logger.info(
        f"Job created: job_id={job.id}, recruiter_id={recruiter.id}, credit_pool={pool}, "
        f"free_remaining={recruiter.free_posts_remaining}, purchased_remaining={recruiter.purchased_posts_remaining}"
    )
    return job


def get_job(db: Session, job_id: str) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise NotFound("Job not found.")
    return job


def list_jobs(
    db: Session,
    search: Optional[str] = None,
    platform: Optional[str] = None,
    experience_level: Optional[str] = None,
    contract_type: Optional[str] = None,
    location: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[Job], int]:
    """Public job board listing, newest first."""
    query = db.query(Job)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Job.title.ilike(search_term),
                Job.description.ilike(search_term),
                Job.technologies.ilike(search_term),
                Job.company_name.ilike(search_term)
            )
        )
    if platform:
        query = query.filter(Job.platform.ilike(f"%{platform}%"))
    if experience_level:
        query = query.filter(Job.experience_level == experience_level)
    if contract_type:
        query = query.filter(Job.contract_type == contract_type)
    if location:
        query = query.filter(Job.location.ilike(f"%{location}%"))

    total = query.count()
    offset = (page - 1) * page_size
    jobs = query.order_by(Job.created_at.desc()).offset(offset).limit(page_size).all()
    return jobs, total


def list_recruiter_jobs(db: Session, recruiter_id: str) -> List[Job]:
    return db.query(Job).filter(Job.recruiter_id == recruiter_id).order_by(Job.created_at.desc()).all()
