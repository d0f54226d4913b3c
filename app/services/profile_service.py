"""
Profile editing and saved jobs.
"""
import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.config import FREE_JOB_POSTS
from app.core.errors import Conflict, ValidationFailed
from app.core.security import hash_password
from app.db.models.job import Job
from app.db.models.user import User, UserRole
from app.schemas.profile import ProfileUpdate
from app.services.job_service import get_job

logger = logging.getLogger(__name__)

RECRUITER_FIELDS = {
    "company_name",
    "company_website",
    "company_description",
    "company_logo_url",
    "company_logo_public_id",
}

CANDIDATE_FIELDS = {
    "phone_number",
    "linkedin_url",
    "github_url",
    "portfolio_url",
    "headline",
    "summary",
    "skills",
    "work_experience",
    "education",
    "cv_url",
    "cv_public_id",
    "cv_mime_type",
    "cv_file_name",
}


def create_user(db: Session, email: str, password: str, role: UserRole, display_name: str = None) -> User:
    """
    Sign up a new user. Recruiters start with the configured free job post allotment.

    Raises:
        Conflict: email already registered
    """
    email = email.lower()
    if db.query(User).filter(User.email == email).first():
        raise Conflict("Email already registered")

    user = User(
        email=email,
        display_name=display_name,
        password_hash=hash_password(password),
        role=role.value,
        free_posts_remaining=FREE_JOB_POSTS if role == UserRole.RECRUITER else 0,
        purchased_posts_remaining=0,
        skills=[],
        work_experience=[],
        education=[],
        saved_jobs=[],
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User created: user_id={user.id}, role={user.role}")
    return user


def update_profile(db: Session, user: User, update: ProfileUpdate) -> User:
    """
    Apply the fields present in the update.

    Raises:
        ValidationFailed: a field belonging to the other role was sent
    """
    changes = update.model_dump(exclude_unset=True)
    foreign = CANDIDATE_FIELDS if user.is_recruiter else RECRUITER_FIELDS
    rejected = sorted(set(changes) & foreign)
    if rejected:
        raise ValidationFailed(f"Fields not editable for a {user.role} profile: {', '.join(rejected)}")

    if "cv_url" in changes and changes["cv_url"] != user.cv_url:
        # Stored text belongs to the old file; one-click apply re-fetches the new one
        user.cv_text_content = None

    for field, value in changes.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    logger.info(f"Profile updated: user_id={user.id}, fields={sorted(changes)}")
    return user


def _require_candidate(user: User):
    if not user.is_candidate:
        raise ValidationFailed("Only candidates can save jobs.")


def save_job(db: Session, user: User, job_id: str) -> List[str]:
    """Add a job to the candidate's saved set. Saving twice is a no-op."""
    _require_candidate(user)
    get_job(db, job_id)

    saved = list(user.saved_jobs or [])
    if job_id not in saved:
        saved.append(job_id)
        # JSON columns only track reassignment
        user.saved_jobs = saved
        db.commit()
        logger.info(f"Job saved: user_id={user.id}, job_id={job_id}")
    return saved


def unsave_job(db: Session, user: User, job_id: str) -> List[str]:
    _require_candidate(user)
    saved = [j for j in (user.saved_jobs or []) if j != job_id]
    if len(saved) != len(user.saved_jobs or []):
        user.saved_jobs = saved
        db.commit()
        logger.info(f"Job unsaved: user_id={user.id}, job_id={job_id}")
    return saved


def list_saved_jobs(db: Session, user: User) -> List[Job]:
    """Saved jobs that still exist, in the order they were saved."""
    _require_candidate(user)
    saved = user.saved_jobs or []
    if not saved:
        return []
    jobs = {job.id: job for job in db.query(Job).filter(Job.id.in_(saved)).all()}
    return [jobs[job_id] for job_id in saved if job_id in jobs]
