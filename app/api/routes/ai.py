"""
AI endpoints for recruiters: interview questions and job description drafts.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth_dependency import AuthSession, get_optional_session
from app.core.errors import ValidationFailed, Forbidden
from app.db.models.job import Job
from app.db.session import get_db
from app.llm.openai_provider import get_default_provider
from app.llm.provider import LLMProvider
from app.schemas.ai import (
    InterviewQuestionsRequest,
    InterviewQuestionsResponse,
    JobDescriptionRequest,
    JobDescriptionResponse,
)
from app.services.application_service import get_application_or_404
from app.services.interview_question_service import InterviewQuestionInput, generate_interview_questions
from app.services.job_description_service import JobDescriptionInput, generate_job_description

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])


def _question_input_from_application(
    db: Session,
    application_id: str,
    session: Optional[AuthSession]
) -> InterviewQuestionInput:
    application = get_application_or_404(db, application_id)
    if session is not None and session.user_id != application.recruiter_id:
        raise Forbidden("Forbidden: You are not authorized to view this application.")

    job = db.get(Job, application.job_id)
    return InterviewQuestionInput(
        job_title=application.job_title,
        job_description=job.description if job else "",
        candidate_strengths=application.ai_strengths or [],
        candidate_weaknesses=application.ai_weaknesses or [],
    )


@router.post("/interview-questions", response_model=InterviewQuestionsResponse)
def interview_questions(
    request: InterviewQuestionsRequest,
    session: Optional[AuthSession] = Depends(get_optional_session),
    provider: Optional[LLMProvider] = Depends(get_default_provider),
    db: Session = Depends(get_db)
):
    """
    Tailored interview questions for one applicant.

    Send an applicationId to reuse the stored AI analysis, or explicit job and
    strengths/weaknesses fields.
    """
    if request.application_id:
        question_input = _question_input_from_application(db, request.application_id, session)
    elif request.job_title and request.job_description:
        question_input = InterviewQuestionInput(
            job_title=request.job_title,
            job_description=request.job_description,
            candidate_strengths=request.candidate_strengths,
            candidate_weaknesses=request.candidate_weaknesses,
        )
    else:
        raise ValidationFailed("Either applicationId or jobTitle and jobDescription are required.")

    questions = generate_interview_questions(question_input, provider=provider)
    return InterviewQuestionsResponse(**questions.model_dump())


@router.post("/generate-job-description", response_model=JobDescriptionResponse)
def job_description(
    request: JobDescriptionRequest,
    provider: Optional[LLMProvider] = Depends(get_default_provider)
):
    """Draft a job description from structured facts; failures come back as placeholder text."""
    facts = JobDescriptionInput(**request.model_dump())
    return JobDescriptionResponse(generated_description=generate_job_description(facts, provider=provider))
