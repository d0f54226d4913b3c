"""
UserProfile model shared by recruiters and candidates.

Role-specific columns stay NULL for the other role.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from app.db.base import Base, generate_id


class UserRole(str, enum.Enum):
    RECRUITER = "recruiter"
    CANDIDATE = "candidate"


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)
    role = Column(String, nullable=False)  # "recruiter" | "candidate", set once at sign-up
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Recruiter company profile
    company_name = Column(String, nullable=True)
    company_website = Column(String, nullable=True)
    company_description = Column(Text, nullable=True)
    company_logo_url = Column(String, nullable=True)
    company_logo_public_id = Column(String, nullable=True)

    # Candidate profile
    phone_number = Column(String, nullable=True)
    linkedin_url = Column(String, nullable=True)
    github_url = Column(String, nullable=True)
    portfolio_url = Column(String, nullable=True)
    headline = Column(String, nullable=True)
    summary = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    work_experience = Column(JSON, nullable=False, default=list)
    education = Column(JSON, nullable=False, default=list)

    # Stored CV, reused by one-click apply
    cv_url = Column(String, nullable=True)
    cv_public_id = Column(String, nullable=True)
    cv_mime_type = Column(String, nullable=True)
    cv_file_name = Column(String, nullable=True)
    cv_text_content = Column(Text, nullable=True)

    # Job post credits
    free_posts_remaining = Column(Integer, nullable=False, default=0)
    purchased_posts_remaining = Column(Integer, nullable=False, default=0)

    saved_jobs = Column(JSON, nullable=False, default=list)  # job ids, set semantics

    @property
    def is_recruiter(self) -> bool:
        return self.role == UserRole.RECRUITER.value

    @property
    def is_candidate(self) -> bool:
        return self.role == UserRole.CANDIDATE.value

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
