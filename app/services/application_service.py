"""
Application workflow: duplicate check -> resolve CV -> AI scoring -> persist -> count.

The steps run in strict order inside one request. They are not wrapped in a
transaction: the application row is committed before the job's counter is
incremented, so application_count is advisory and may drift if the second
commit fails. The duplicate check is a read-then-write query; two concurrent
submissions for the same (candidate, job) pair can both pass it.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Callable, List

import requests
from sqlalchemy.orm import Session

from app.core.errors import ValidationFailed, Forbidden, NotFound, Conflict, UpstreamServiceError
from app.db.models.user import User
from app.db.models.job import Job
from app.db.models.application import (
    Application,
    ApplicationStatus,
    RECRUITER_STATUSES,
    TERMINAL_STATUSES,
)
from app.llm.provider import LLMProvider
from app.services import media_service
from app.services.cv_analysis_service import AnalyzeCvInput, AnalyzeCvOutput, analyze_cv_against_job
from app.services.cv_text_extractor import extract_cv_text, build_data_uri, CvTextExtractionError

logger = logging.getLogger(__name__)

NOT_PERFORMED_SUMMARY = "AI analysis was not performed."


class WorkflowState(str, enum.Enum):
    NOT_APPLIED = "NotApplied"
    APPLYING = "Applying"
    APPLIED = "Applied"
    FAILED = "Failed"


@dataclass
class ResolvedCv:
    """CV material for one application: where it lives plus what the model will read."""
    url: Optional[str]
    public_id: Optional[str]
    mime_type: Optional[str]
    file_name: Optional[str] = None
    text_content: Optional[str] = None
    data_uri: Optional[str] = None


# ============================================
# Store helpers
# ============================================

def get_job_or_404(db: Session, job_id: str) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise NotFound("Job not found.")
    return job


def get_candidate_or_404(db: Session, candidate_id: str) -> User:
    candidate = db.get(User, candidate_id)
    if not candidate:
        raise NotFound("Candidate profile not found.")
    if not candidate.is_candidate:
        raise ValidationFailed("Only candidate accounts can apply for jobs.")
    return candidate


def get_application_or_404(db: Session, application_id: str) -> Application:
    application = db.get(Application, application_id)
    if not application:
        raise NotFound("Application not found.")
    return application


def find_active_application(db: Session, job_id: str, candidate_id: str) -> Optional[Application]:
    """Existing non-withdrawn application for the pair, if any."""
    return db.query(Application).filter(
        Application.job_id == job_id,
        Application.candidate_id == candidate_id,
        Application.status != ApplicationStatus.WITHDRAWN.value,
    ).first()


def increment_application_count(db: Session, job_id: str) -> bool:
    """
    Atomically bump jobs.application_count in its own commit.

    Returns False (and logs) on failure; the already-committed application stands.
    """
    try:
        db.query(Job).filter(Job.id == job_id).update(
            {Job.application_count: Job.application_count + 1},
            synchronize_session=False,
        )
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.warning(f"Application recorded but job counter not incremented: job_id={job_id}, error={e}")
        return False


# ============================================
# CV resolution
# ============================================

def fetch_cv_bytes(url: str) -> bytes:
    """Download a stored CV. No retry; network defaults of requests apply."""
    try:
        response = requests.get(url)
    except requests.RequestException as e:
        raise UpstreamServiceError(f"Failed to fetch CV from Cloudinary: {e}")
    if not response.ok:
        raise UpstreamServiceError(f"Failed to fetch CV from Cloudinary. Status: {response.status_code}")
    return response.content


def _text_or_none(data: bytes, mime_type: Optional[str]) -> Optional[str]:
    try:
        return extract_cv_text(data, mime_type)
    except CvTextExtractionError as e:
        logger.warning(f"Falling back to raw CV file for analysis: {e}")
        return None


def cv_from_bytes(
    data: bytes,
    mime_type: Optional[str],
    url: Optional[str],
    public_id: Optional[str],
    file_name: Optional[str] = None,
) -> ResolvedCv:
    text = _text_or_none(data, mime_type)
    return ResolvedCv(
        url=url,
        public_id=public_id,
        mime_type=mime_type,
        file_name=file_name,
        text_content=text,
        # The file is only sent to the model when there is no text
        data_uri=None if text else build_data_uri(data, mime_type or "application/octet-stream"),
    )


def stored_cv_resolver(candidate: User, fetcher: Callable[[str], bytes]) -> Callable[[], ResolvedCv]:
    """One-click path: reuse the profile CV, re-fetching the file only when no text is stored."""
    def resolve() -> ResolvedCv:
        if candidate.cv_text_content and candidate.cv_text_content.strip():
            return ResolvedCv(
                url=candidate.cv_url,
                public_id=candidate.cv_public_id,
                mime_type=candidate.cv_mime_type,
                file_name=candidate.cv_file_name,
                text_content=candidate.cv_text_content,
            )
        data = fetcher(candidate.cv_url)
        return cv_from_bytes(
            data,
            candidate.cv_mime_type,
            candidate.cv_url,
            candidate.cv_public_id,
            candidate.cv_file_name,
        )
    return resolve


def uploaded_cv_resolver(
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str],
    uploader: Callable[..., media_service.UploadResult],
) -> Callable[[], ResolvedCv]:
    """Manual path: push the fresh file to the media host, then read it locally."""
    def resolve() -> ResolvedCv:
        uploaded = uploader(media_service.CV, data, filename, content_type)
        return cv_from_bytes(data, content_type, uploaded.url, uploaded.public_id, filename)
    return resolve


# ============================================
# Workflow
# ============================================

class ApplicationWorkflow:
    """
    One submission attempt for (candidate, job).

    NotApplied -> Applying -> Applied, or Applying -> Failed. A failed attempt
    leaves nothing behind except possibly an uploaded file; the user retries
    with a new workflow.
    """

    def __init__(self, db: Session, job: Job, candidate: User, provider: Optional[LLMProvider] = None):
        self.db = db
        self.job = job
        self.candidate = candidate
        self.provider = provider
        self.state = WorkflowState.NOT_APPLIED
        self.analysis: Optional[AnalyzeCvOutput] = None
        self.application: Optional[Application] = None

    def _transition(self, state: WorkflowState):
        logger.debug(
            f"Application workflow {self.state.value} -> {state.value}: "
            f"job_id={self.job.id}, candidate_id={self.candidate.id}"
        )
        self.state = state

    def run(self, resolve_cv: Callable[[], ResolvedCv], remember_cv: bool = False) -> Application:
        """
        Execute the workflow.

        Args:
            resolve_cv: Produces the CV for this attempt (fresh upload or stored profile CV)
            remember_cv: Store the resolved CV on the candidate profile for later one-click applies

        Raises:
            Conflict: a non-withdrawn application already exists
            AppError: CV could not be resolved, or the application could not be saved
        """
        if self.state != WorkflowState.NOT_APPLIED:
            raise RuntimeError(f"Workflow already in state {self.state.value}")
        self._transition(WorkflowState.APPLYING)

        try:
            self._check_duplicate()
            cv = resolve_cv()
            self.analysis = self._analyze(cv)
            self.application = self._persist(cv, self.analysis, remember_cv)
        except Exception:
            self._transition(WorkflowState.FAILED)
            raise

        increment_application_count(self.db, self.job.id)
        self._transition(WorkflowState.APPLIED)
        return self.application

    def _check_duplicate(self):
        if find_active_application(self.db, self.job.id, self.candidate.id):
            raise Conflict("You have already applied for this job.")

    def _analyze(self, cv: ResolvedCv) -> AnalyzeCvOutput:
        analysis_input = AnalyzeCvInput(
            job_title=self.job.title,
            job_description=self.job.description,
            job_technologies=self.job.technologies or "",
            job_experience_level=self.job.experience_level or "",
            cv_text_content=cv.text_content,
            cv_data_uri=cv.data_uri,
        )
        try:
            return analyze_cv_against_job(analysis_input, provider=self.provider)
        except Exception as e:
            # analyze_cv_against_job does not raise; this keeps the workflow alive if that ever changes
            logger.error(f"AI analysis failed during application: {e}", exc_info=True)
            return AnalyzeCvOutput(
                score=0,
                summary=f"AI analysis could not be completed for this application. Reason: {e or 'Model did not respond correctly.'}",
                strengths=[],
                weaknesses=[NOT_PERFORMED_SUMMARY],
            )

    def _persist(self, cv: ResolvedCv, analysis: AnalyzeCvOutput, remember_cv: bool) -> Application:
        application = Application(
            candidate_id=self.candidate.id,
            candidate_name=self.candidate.display_name or self.candidate.email,
            candidate_email=self.candidate.email,
            job_id=self.job.id,
            job_title=self.job.title,
            recruiter_id=self.job.recruiter_id,
            company_name=self.job.company_name or "",
            company_logo_url=self.job.company_logo_url or "",
            cv_url=cv.url,
            cv_public_id=cv.public_id,
            status=ApplicationStatus.APPLIED.value,
            ai_score=analysis.score,
            ai_analysis_summary=analysis.summary,
            ai_strengths=list(analysis.strengths),
            ai_weaknesses=list(analysis.weaknesses),
        )
        self.db.add(application)

        if remember_cv:
            self.candidate.cv_url = cv.url
            self.candidate.cv_public_id = cv.public_id
            self.candidate.cv_mime_type = cv.mime_type
            self.candidate.cv_file_name = cv.file_name
            self.candidate.cv_text_content = cv.text_content

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(application)

        logger.info(
            f"Application created: application_id={application.id}, job_id={self.job.id}, "
            f"candidate_id={self.candidate.id}, ai_score={application.ai_score}"
        )
        return application


# ============================================
# Operations
# ============================================

def apply_one_click(
    db: Session,
    job_id: str,
    candidate_id: str,
    provider: Optional[LLMProvider] = None,
    fetcher: Callable[[str], bytes] = fetch_cv_bytes,
) -> Application:
    """
    Apply with the CV already stored on the candidate profile.

    Raises:
        NotFound: job or candidate missing
        ValidationFailed: profile has no CV URL / file type
        Conflict: already applied
        UpstreamServiceError: stored CV could not be fetched
    """
    job = get_job_or_404(db, job_id)
    candidate = get_candidate_or_404(db, candidate_id)

    if not candidate.cv_url or not candidate.cv_mime_type:
        raise ValidationFailed(
            "Candidate CV URL or file type is missing from profile. "
            "Please re-upload your CV to enable one-click apply."
        )

    workflow = ApplicationWorkflow(db, job, candidate, provider=provider)
    return workflow.run(stored_cv_resolver(candidate, fetcher))


def apply_with_upload(
    db: Session,
    job_id: str,
    candidate_id: str,
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str],
    provider: Optional[LLMProvider] = None,
    uploader: Callable[..., media_service.UploadResult] = media_service.upload_file,
) -> Application:
    """
    Apply with a freshly uploaded CV; the CV also becomes the profile CV.

    Raises:
        ValidationFailed: file rejected (size/type)
        NotFound: job or candidate missing
        Conflict: already applied
        UpstreamServiceError: media host upload failed
    """
    media_service.validate_upload(media_service.CV, len(data), content_type)
    job = get_job_or_404(db, job_id)
    candidate = get_candidate_or_404(db, candidate_id)

    workflow = ApplicationWorkflow(db, job, candidate, provider=provider)
    return workflow.run(uploaded_cv_resolver(data, filename, content_type, uploader), remember_cv=True)


def update_application_status(db: Session, application_id: str, status: str, recruiter_id: str) -> Application:
    """
    Recruiter-driven status change. No ordering is enforced between recruiter statuses.

    Raises:
        ValidationFailed: status is not a recruiter-settable status
        NotFound: application missing
        Forbidden: recruiter does not own the job behind the application
    """
    if status not in RECRUITER_STATUSES:
        raise ValidationFailed(f"Invalid status provided. Must be one of: {', '.join(RECRUITER_STATUSES)}")

    application = get_application_or_404(db, application_id)

    job = db.get(Job, application.job_id)
    owner_id = job.recruiter_id if job else application.recruiter_id
    if owner_id != recruiter_id:
        logger.warning(
            f"Status update refused: application_id={application_id}, recruiter_id={recruiter_id}"
        )
        raise Forbidden("Forbidden: You are not authorized to update this application.")

    previous = application.status
    application.status = status
    db.commit()
    db.refresh(application)

    logger.info(f"Application status updated: application_id={application_id}, {previous} -> {status}")
    return application


def withdraw_application(db: Session, application_id: str, candidate_id: str) -> Application:
    """
    Candidate-driven withdrawal.

    Raises:
        NotFound: application missing
        Forbidden: caller is not the applicant
        Conflict: application already Withdrawn or Rejected
    """
    application = get_application_or_404(db, application_id)

    if application.candidate_id != candidate_id:
        raise Forbidden("Forbidden: You are not authorized to withdraw this application.")

    if application.status in TERMINAL_STATUSES:
        raise Conflict(f"Cannot withdraw an application that is already {application.status}.")

    application.status = ApplicationStatus.WITHDRAWN.value
    db.commit()
    db.refresh(application)

    logger.info(f"Application withdrawn: application_id={application_id}, candidate_id={candidate_id}")
    return application


def list_candidate_applications(db: Session, candidate_id: str) -> List[Application]:
    return db.query(Application).filter(
        Application.candidate_id == candidate_id
    ).order_by(Application.applied_at.desc()).all()


def list_job_applications(db: Session, job_id: str, recruiter_id: str) -> List[Application]:
    """Applicants for a job, best AI score first. Only the owning recruiter may list them."""
    job = get_job_or_404(db, job_id)
    if job.recruiter_id != recruiter_id:
        raise Forbidden("Forbidden: You are not authorized to view applicants for this job.")
    applications = db.query(Application).filter(Application.job_id == job_id).all()
    return sorted(
        applications,
        key=lambda a: (a.ai_score is None, -(a.ai_score or 0)),
    )
