"""
CV scoring against a job posting.

Calls the hosted model with a fixed output schema and always returns an
AnalyzeCvOutput: failures are converted into a score-0 record whose summary
explains what went wrong, so the application flow never hard-fails on AI.
"""
import logging
import re
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field

from app.core.logging_config import sanitize_log_data
from app.llm.provider import LLMProvider
from app.llm.runner import run_structured, InvalidModelOutput

logger = logging.getLogger(__name__)

FEATURE = "cv_analysis"

DATA_URI_PATTERN = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64,", re.IGNORECASE)

FILE_EXTENSIONS = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}


# ============================================
# Models
# ============================================

class AnalyzeCvInput(BaseModel):
    """Job facts plus the CV, as extracted text (preferred) or a base64 data URI."""
    job_title: str
    job_description: str
    job_technologies: str = ""
    job_experience_level: str = ""
    cv_text_content: Optional[str] = None
    cv_data_uri: Optional[str] = None


class AnalyzeCvOutput(BaseModel):
    score: int = Field(..., ge=0, le=100, description="Relevance of the CV to the job, 100 is a perfect match")
    summary: str = Field(..., description="2-3 sentences justifying the score")
    strengths: List[str] = Field(default_factory=list, description="3-5 strengths relevant to this job")
    weaknesses: List[str] = Field(default_factory=list, description="2-3 constructive gaps for this job")


# ============================================
# Prompt
# ============================================

SYSTEM_PROMPT = (
    "You are an expert Technical Recruiter and Talent Sourcer. You analyze a candidate's "
    "Curriculum Vitae (CV) against a specific job opening and answer with a single JSON object."
)

ANALYSIS_INSTRUCTIONS = """Job Details:
- Title: {job_title}
- Required Experience Level: {job_experience_level}
- Key Technologies/Skills: {job_technologies}
- Full Job Description:
{job_description}

Based on the CV content and the job details, provide:
1. score: an integer from 0 to 100, where 100 is a perfect match. Consider experience, skills, technologies and overall fit for the "{job_title}" role at the "{job_experience_level}" level.
2. summary: a brief (2-3 sentences) explanation of why the candidate is or isn't a good fit, justifying the score.
3. strengths: 3-5 strings with the candidate's key strengths relevant to THIS job, naming the skills and technologies from the job description where they apply.
4. weaknesses: 2-3 strings with potential weaknesses or gaps concerning THIS job. Be constructive.

Return ONLY a JSON object with the keys "score", "summary", "strengths", "weaknesses"."""


def has_usable_text(cv_text_content: Optional[str]) -> bool:
    return bool(cv_text_content and cv_text_content.strip())


def mime_type_from_data_uri(cv_data_uri: Optional[str]) -> Optional[str]:
    """MIME type from a 'data:<mime>;base64,' prefix, or None if the URI is missing/malformed."""
    if not cv_data_uri:
        return None
    match = DATA_URI_PATTERN.match(cv_data_uri)
    return match.group(1).lower() if match else None


def build_cv_analysis_messages(analysis_input: AnalyzeCvInput) -> List[Dict[str, Any]]:
    """
    Build the chat messages for one analysis.

    Extracted text takes strict priority: when it is present the file itself is
    not attached at all.
    """
    instructions = ANALYSIS_INSTRUCTIONS.format(
        job_title=analysis_input.job_title,
        job_experience_level=analysis_input.job_experience_level or "Not specified",
        job_technologies=analysis_input.job_technologies or "Not specified",
        job_description=analysis_input.job_description,
    )

    if has_usable_text(analysis_input.cv_text_content):
        user_content: Any = (
            f"{instructions}\n\nCandidate's CV (extracted text):\n"
            f"{analysis_input.cv_text_content.strip()}"
        )
    else:
        mime_type = mime_type_from_data_uri(analysis_input.cv_data_uri)
        extension = FILE_EXTENSIONS.get(mime_type, "bin")
        user_content = [
            {"type": "text", "text": f"{instructions}\n\nCandidate's CV is attached as a file."},
            {
                "type": "file",
                "file": {"filename": f"cv.{extension}", "file_data": analysis_input.cv_data_uri},
            },
        ]

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


# ============================================
# Fallbacks
# ============================================

def classify_analysis_failure(
    error_message: str,
    cv_text_content: Optional[str],
    cv_data_uri: Optional[str],
) -> AnalyzeCvOutput:
    """
    Turn a failed model call into a degraded analysis record.

    Precedence:
        1. unsupported MIME type ("mimeType" + "not supported" in the error)
        2. safety / content filter ("SAFETY" or "blocked")
        3. no text, data URI present: raw-file analysis may be incomplete
        4. no text, no valid data URI: no usable content
        5. generic failure carrying the raw error text
    """
    message = error_message or "Unknown error"
    mime_type = mime_type_from_data_uri(cv_data_uri)

    if "mimeType" in message and "not supported" in message:
        shown_type = mime_type or "unknown"
        return AnalyzeCvOutput(
            score=0,
            summary=(
                f"AI analysis failed: the uploaded CV file type ({shown_type}) is not supported for "
                "content analysis by the AI model. The application has been submitted without AI insights."
            ),
            strengths=[],
            weaknesses=[f"The CV format ({shown_type}) could not be analyzed automatically."],
        )

    if "SAFETY" in message or "blocked" in message:
        return AnalyzeCvOutput(
            score=0,
            summary=(
                "AI analysis was blocked: the CV content may have triggered the AI model's safety filters. "
                "The application has been submitted without AI insights."
            ),
            strengths=[],
            weaknesses=["AI analysis could not be completed because of content safety filtering."],
        )

    if not has_usable_text(cv_text_content):
        if mime_type:
            return AnalyzeCvOutput(
                score=0,
                summary=(
                    "AI analysis may be incomplete: no extracted CV text was available, so the AI model "
                    f"attempted to analyze the raw CV file ({mime_type}) and did not succeed. "
                    f"Details: {message}"
                ),
                strengths=[],
                weaknesses=["AI analysis of the raw CV file could not be completed."],
            )
        return AnalyzeCvOutput(
            score=0,
            summary="AI analysis could not be performed: no usable CV content (text or file) was provided.",
            strengths=[],
            weaknesses=["No usable CV content was available for analysis."],
        )

    return AnalyzeCvOutput(
        score=0,
        summary=f"Error during AI analysis: {message}",
        strengths=[],
        weaknesses=["AI analysis could not be completed due to an error."],
    )


def invalid_output_result() -> AnalyzeCvOutput:
    return AnalyzeCvOutput(
        score=0,
        summary="AI analysis failed to produce a valid output.",
        strengths=[],
        weaknesses=["AI analysis returned an invalid output, so no insights are available."],
    )


# ============================================
# Service
# ============================================

def analyze_cv_against_job(
    analysis_input: AnalyzeCvInput,
    provider: Optional[LLMProvider] = None,
) -> AnalyzeCvOutput:
    """
    Score a CV against a job. Never raises.

    Args:
        analysis_input: Job facts and CV content
        provider: LLM provider; None when no model is configured
    """
    has_text = has_usable_text(analysis_input.cv_text_content)
    if not has_text and not mime_type_from_data_uri(analysis_input.cv_data_uri):
        logger.warning(f"CV analysis skipped for '{analysis_input.job_title}': no usable CV content")
        return classify_analysis_failure("No usable CV content", None, None)

    try:
        messages = build_cv_analysis_messages(analysis_input)
        result = run_structured(provider, FEATURE, messages, AnalyzeCvOutput)
        logger.info(
            f"CV analysis completed: job='{analysis_input.job_title}', score={result.score}, "
            f"source={'text' if has_text else 'file'}"
        )
        return result
    except InvalidModelOutput as e:
        logger.warning(f"CV analysis produced invalid output: {e}")
        return invalid_output_result()
    except Exception as e:
        logger.error(f"Error in CV analysis: {type(e).__name__}: {e}", exc_info=True)
        logger.debug(f"Failed CV analysis input: {sanitize_log_data(analysis_input.model_dump())}")
        return classify_analysis_failure(
            str(e),
            analysis_input.cv_text_content,
            analysis_input.cv_data_uri,
        )
