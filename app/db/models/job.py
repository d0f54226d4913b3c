"""
Job posting owned by one recruiter.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from app.db.base import Base, generate_id

CONTRACT_TYPES = ("Full-time", "Part-time", "Contract")
EXPERIENCE_LEVELS = ("Entry", "Mid", "Senior")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(32), primary_key=True, default=generate_id)
    recruiter_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    platform = Column(String, nullable=False, index=True)
    technologies = Column(String, nullable=False, default="")  # comma-joined, e.g. "Kubernetes,AWS"
    modules = Column(String, nullable=True)
    location = Column(String, nullable=False)
    contract_type = Column(String, nullable=False)
    experience_level = Column(String, nullable=False)

    # Denormalized from the recruiter profile at posting time
    company_name = Column(String, nullable=True)
    company_logo_url = Column(String, nullable=True)
    company_website = Column(String, nullable=True)

    # Advisory only: incremented after the application row is committed
    application_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_jobs_recruiter_created', 'recruiter_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}')>"
