"""
Interview question generation from a job and the CV analysis of a candidate.
"""
import logging
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field

from app.llm.provider import LLMProvider
from app.llm.runner import run_structured

logger = logging.getLogger(__name__)

FEATURE = "interview_questions"


class InterviewQuestionInput(BaseModel):
    job_title: str
    job_description: str
    candidate_strengths: List[str] = Field(default_factory=list)
    candidate_weaknesses: List[str] = Field(default_factory=list)


class InterviewQuestions(BaseModel):
    technical_questions: List[str] = Field(..., min_length=1, description="3-5 technical questions")
    behavioral_questions: List[str] = Field(..., min_length=1, description="2-3 behavioral questions")
    situational_questions: List[str] = Field(..., min_length=1, description="2-3 situational questions")


PROMPT = """You are an expert technical recruiter and hiring manager preparing for an interview.
Generate a concise, insightful set of interview questions for a candidate based on their profile relative to a specific job.

Job Details:
- Title: {job_title}
- Description: {job_description}

Candidate Analysis (based on their CV):
- Key Strengths:
{strengths}
- Potential Weaknesses/Gaps:
{weaknesses}

Generate the following categories of questions:
1. technical_questions (3-5): specific technical questions that validate the candidate's listed strengths and probe the knowledge required by the job description.
2. behavioral_questions (2-3): questions about how the candidate has behaved in past professional situations, focusing on teamwork, communication and alignment with company values.
3. situational_questions (2-3): scenario-based questions that each explore one of the candidate's weaknesses or gaps constructively. Frame them to understand the candidate's problem-solving approach and willingness to learn, never to corner or accuse them. For example, for "limited experience with cloud platforms": "Describe a situation where you had to quickly learn a new technology for a project. How did you approach it?"

Return ONLY a JSON object with the keys "technical_questions", "behavioral_questions", "situational_questions", each an array of strings."""


def _bullets(items: List[str]) -> str:
    if not items:
        return "  - None identified"
    return "\n".join(f"  - {item}" for item in items)


def build_interview_messages(question_input: InterviewQuestionInput) -> List[Dict[str, Any]]:
    prompt = PROMPT.format(
        job_title=question_input.job_title,
        job_description=question_input.job_description,
        strengths=_bullets(question_input.candidate_strengths),
        weaknesses=_bullets(question_input.candidate_weaknesses),
    )
    return [{"role": "user", "content": prompt}]


def placeholder_questions(error_message: str) -> InterviewQuestions:
    """One placeholder per category so the UI always has something to render."""
    return InterviewQuestions(
        technical_questions=[f"Error generating technical questions: {error_message}"],
        behavioral_questions=[f"Error generating behavioral questions: {error_message}"],
        situational_questions=[f"Error generating situational questions: {error_message}"],
    )


def generate_interview_questions(
    question_input: InterviewQuestionInput,
    provider: Optional[LLMProvider] = None,
) -> InterviewQuestions:
    """Generate categorized interview questions. Never raises."""
    try:
        result = run_structured(provider, FEATURE, build_interview_messages(question_input), InterviewQuestions)
    except Exception as e:
        logger.error(f"Error generating interview questions: {type(e).__name__}: {e}", exc_info=True)
        return placeholder_questions(str(e) or "Unknown error")
    
    # Hold the model to the requested sizes
    return InterviewQuestions(
        technical_questions=result.technical_questions[:5],
        behavioral_questions=result.behavioral_questions[:3],
        situational_questions=result.situational_questions[:3],
    )
