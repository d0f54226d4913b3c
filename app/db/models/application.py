"""
Application of one candidate to one job, with the AI analysis captured at apply time.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from app.db.base import Base, generate_id


class ApplicationStatus(str, enum.Enum):
    APPLIED = "Applied"
    UNDER_REVIEW = "Under Review"
    INTERVIEWING = "Interviewing"
    OFFER_EXTENDED = "Offer Extended"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


# Statuses a recruiter may set; Withdrawn belongs to the candidate
RECRUITER_STATUSES = [
    ApplicationStatus.APPLIED.value,
    ApplicationStatus.UNDER_REVIEW.value,
    ApplicationStatus.INTERVIEWING.value,
    ApplicationStatus.OFFER_EXTENDED.value,
    ApplicationStatus.REJECTED.value,
]

# No further withdrawal from these
TERMINAL_STATUSES = {ApplicationStatus.WITHDRAWN.value, ApplicationStatus.REJECTED.value}


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(32), primary_key=True, default=generate_id)

    # No unique constraint on (candidate_id, job_id): duplicates are rejected by a pre-check query
    candidate_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    candidate_name = Column(String, nullable=True)
    candidate_email = Column(String, nullable=True)
    job_id = Column(String(32), ForeignKey("jobs.id"), nullable=False, index=True)
    job_title = Column(String, nullable=False)
    recruiter_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    company_name = Column(String, nullable=True)
    company_logo_url = Column(String, nullable=True)

    cv_url = Column(String, nullable=True)
    cv_public_id = Column(String, nullable=True)

    applied_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    status = Column(String, nullable=False, default=ApplicationStatus.APPLIED.value)

    ai_score = Column(Integer, nullable=True)
    ai_analysis_summary = Column(Text, nullable=True)
    ai_strengths = Column(JSON, nullable=False, default=list)
    ai_weaknesses = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index('idx_applications_job_candidate', 'job_id', 'candidate_id'),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, job_id={self.job_id}, status='{self.status}')>"
