"""
Shared fixtures: in-memory database, test client, users and a fake LLM provider.
"""
import json
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.db.models.user import User, UserRole
from app.db.models.job import Job
from app.core.security import hash_password, create_access_token
from app.llm.openai_provider import get_default_provider
from app.llm.provider import LLMProvider, LLMResponse


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the database dependency
app.dependency_overrides[get_db] = override_get_db


class FakeProvider(LLMProvider):
    """Scripted LLM: returns fixed content or raises, and records every call."""

    def __init__(self, content="", error=None, finish_reason="stop", refusal=None):
        self.content = content if isinstance(content, str) else json.dumps(content)
        self.error = error
        self.finish_reason = finish_reason
        self.refusal = refusal
        self.calls = []

    def chat(self, messages, model, temperature=0.7, max_tokens=None, json_output=False, **kwargs):
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "json_output": json_output,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content,
            model=model,
            finish_reason=self.finish_reason,
            metadata={"refusal": self.refusal},
        )


GOOD_ANALYSIS = {
    "score": 82,
    "summary": "Strong Kubernetes background that matches the platform focus.",
    "strengths": ["Kubernetes operations", "Terraform", "AWS networking"],
    "weaknesses": ["Limited GCP exposure", "No on-call leadership mentioned"],
}


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)
    app.dependency_overrides.pop(get_default_provider, None)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def fake_provider_cls():
    return FakeProvider


@pytest.fixture
def scoring_provider():
    """Provider answering every call with a valid CV analysis."""
    return FakeProvider(GOOD_ANALYSIS)


@pytest.fixture
def use_provider():
    """Install a provider for API requests."""
    def install(provider):
        app.dependency_overrides[get_default_provider] = lambda: provider
        return provider
    return install


@pytest.fixture
def recruiter(db_session):
    user = User(
        email="recruiter@example.com",
        display_name="Rita Recruiter",
        password_hash=hash_password("testpass123"),
        role=UserRole.RECRUITER.value,
        company_name="CloudCo",
        company_logo_url="https://res.cloudinary.com/demo/image/upload/company_logos/cloudco.png",
        company_website="https://cloudco.example.com",
        free_posts_remaining=1,
        purchased_posts_remaining=0,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_recruiter(db_session):
    user = User(
        email="other@example.com",
        display_name="Otto Other",
        password_hash=hash_password("testpass123"),
        role=UserRole.RECRUITER.value,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def candidate(db_session):
    user = User(
        email="candidate@example.com",
        display_name="Casey Candidate",
        password_hash=hash_password("testpass123"),
        role=UserRole.CANDIDATE.value,
        cv_url="https://res.cloudinary.com/demo/raw/upload/cv_uploads/casey_cv_1718000000000",
        cv_public_id="cv_uploads/casey_cv_1718000000000",
        cv_mime_type="application/pdf",
        cv_file_name="casey_cv.pdf",
        cv_text_content="Casey Candidate. 6 years running Kubernetes on AWS. Terraform, Helm, Prometheus.",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def job(db_session, recruiter):
    job = Job(
        recruiter_id=recruiter.id,
        title="Senior Platform Engineer",
        description="Own and scale our Kubernetes platform on AWS.",
        platform="Kubernetes",
        technologies="Kubernetes,Terraform,AWS",
        location="Remote",
        contract_type="Full-time",
        experience_level="Senior",
        company_name=recruiter.company_name,
        company_logo_url=recruiter.company_logo_url,
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    return job


@pytest.fixture
def auth_header():
    """Bearer header for a user."""
    def build(user):
        token = create_access_token({"sub": user.id, "role": user.role})
        return {"Authorization": f"Bearer {token}"}
    return build
