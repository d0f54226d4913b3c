"""
Application endpoints: apply, status changes, withdrawal, listings.

Body-identified endpoints work without a token; when a bearer token is sent
it must belong to the user named in the body. Listings always require a token.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import AuthSession, get_current_session, get_optional_session, ensure_same_user
from app.db.session import get_db
from app.llm.openai_provider import get_default_provider
from app.llm.provider import LLMProvider
from app.schemas.application import (
    ApplyOneClickRequest,
    UpdateStatusRequest,
    WithdrawRequest,
    ApplicationResponse,
    ApplySuccessResponse,
    ApplicationListResponse,
)
from app.schemas.common import MessageResponse
from app.services import application_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Applications"])


def _application_list(applications) -> ApplicationListResponse:
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        total=len(applications),
    )


@router.post("/applications/apply-one-click", status_code=status.HTTP_200_OK, response_model=ApplySuccessResponse)
def apply_one_click(
    request: ApplyOneClickRequest,
    session: Optional[AuthSession] = Depends(get_optional_session),
    provider: Optional[LLMProvider] = Depends(get_default_provider),
    db: Session = Depends(get_db)
):
    """
    Apply with the CV stored on the candidate profile.

    The CV is scored against the job before the application is saved; AI
    failures degrade the score, they never block the application.
    """
    ensure_same_user(session, request.candidate_id)

    application = application_service.apply_one_click(
        db,
        job_id=request.job_id,
        candidate_id=request.candidate_id,
        provider=provider,
    )
    return ApplySuccessResponse(application_id=application.id, ai_score=application.ai_score)


@router.post("/applications/apply", status_code=status.HTTP_200_OK, response_model=ApplySuccessResponse)
def apply_with_cv(
    job_id: str = Form(..., alias="jobId", min_length=1),
    candidate_id: str = Form(..., alias="candidateId", min_length=1),
    cv: UploadFile = File(...),
    session: Optional[AuthSession] = Depends(get_optional_session),
    provider: Optional[LLMProvider] = Depends(get_default_provider),
    db: Session = Depends(get_db)
):
    """Apply with a freshly uploaded CV (multipart field `cv`); the CV is also saved to the profile."""
    ensure_same_user(session, candidate_id)

    data = cv.file.read()
    application = application_service.apply_with_upload(
        db,
        job_id=job_id,
        candidate_id=candidate_id,
        data=data,
        filename=cv.filename,
        content_type=cv.content_type,
        provider=provider,
    )
    return ApplySuccessResponse(application_id=application.id, ai_score=application.ai_score)


@router.post("/applications/update-status", response_model=MessageResponse)
def update_status(
    request: UpdateStatusRequest,
    session: Optional[AuthSession] = Depends(get_optional_session),
    db: Session = Depends(get_db)
):
    ensure_same_user(session, request.recruiter_id)

    application_service.update_application_status(
        db,
        application_id=request.application_id,
        status=request.status,
        recruiter_id=request.recruiter_id,
    )
    return MessageResponse(message="Application status updated successfully.")


@router.post("/applications/withdraw", response_model=MessageResponse)
def withdraw(
    request: WithdrawRequest,
    session: Optional[AuthSession] = Depends(get_optional_session),
    db: Session = Depends(get_db)
):
    ensure_same_user(session, request.candidate_id)

    application_service.withdraw_application(
        db,
        application_id=request.application_id,
        candidate_id=request.candidate_id,
    )
    return MessageResponse(message="Application withdrawn successfully.")


@router.get("/applications/candidate/{candidate_id}", response_model=ApplicationListResponse)
def list_candidate_applications(
    candidate_id: str,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Applications submitted by one candidate, newest first."""
    ensure_same_user(session, candidate_id)
    return _application_list(application_service.list_candidate_applications(db, candidate_id))


@router.get("/jobs/{job_id}/applications", response_model=ApplicationListResponse)
def list_job_applications(
    job_id: str,
    recruiter_id: str = Query(..., alias="recruiterId", description="Recruiter who owns the job"),
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Applicants for a job, highest AI score first."""
    ensure_same_user(session, recruiter_id)
    return _application_list(application_service.list_job_applications(db, job_id, recruiter_id))
