"""
Marketing-style job description generation for new postings.
"""
import logging
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field

from app.llm.provider import LLMProvider
from app.llm.router import get_model_for_feature, get_temperature_for_feature

logger = logging.getLogger(__name__)

FEATURE = "job_description"

INVALID_OUTPUT_MESSAGE = "Error: Could not generate job description. The AI model did not return a valid output."


class JobDescriptionInput(BaseModel):
    job_title: str
    platform: str
    technologies: str
    modules: Optional[str] = None
    experience_level: str
    location: str
    contract_type: Optional[str] = None
    key_responsibilities_summary: str = Field(..., min_length=1)
    company_culture_snippet: Optional[str] = None


def build_job_description_prompt(facts: JobDescriptionInput) -> str:
    details = [
        f"- Job Title: {facts.job_title}",
        f"- Platform Focus: {facts.platform}",
        f"- Key Technologies: {facts.technologies}",
    ]
    if facts.modules:
        details.append(f"- Relevant Modules/Specializations: {facts.modules}")
    details.append(f"- Experience Level: {facts.experience_level}")
    details.append(f"- Location: {facts.location}")
    if facts.contract_type:
        details.append(f"- Contract Type: {facts.contract_type}")
    details.append(f"- Key Responsibilities Summary: {facts.key_responsibilities_summary}")
    if facts.company_culture_snippet:
        details.append(f"- About Our Company: {facts.company_culture_snippet}")

    sections = [
        "1. An engaging introduction to the role and company"
        + (" (work the company snippet in here)." if facts.company_culture_snippet else "."),
        "2. Role Overview: the main purpose of this role.",
        "3. Key Responsibilities: 5-7 detailed bullet points elaborating on the responsibilities summary.",
        f"4. Required Skills & Qualifications: based on the platform ({facts.platform}), technologies "
        f"({facts.technologies}), modules ({facts.modules or 'N/A'}) and experience level ({facts.experience_level}).",
        "5. Preferred Qualifications (optional): desirable but not essential skills, only if applicable.",
    ]
    if facts.company_culture_snippet:
        sections.append("6. Working With Us: expand slightly on the company culture snippet.")
    sections.append(
        f"{len(sections) + 1}. A clear call to action encouraging candidates to apply, e.g. "
        f"\"If you are passionate about {facts.platform} and eager to make an impact, we encourage you to apply!\""
    )

    return (
        "You are an expert recruitment copywriter creating a compelling and detailed job description.\n"
        "Use a professional and engaging tone. Do not use markdown headings (## or ###); use bold text "
        "for section titles or simply start new paragraphs.\n\n"
        "Given the following details:\n" + "\n".join(details) + "\n\n"
        "Write the full job description with these sections, in this order:\n" + "\n".join(sections) + "\n\n"
        "Output only the job description text, with good spacing between paragraphs."
    )


def generate_job_description(
    facts: JobDescriptionInput,
    provider: Optional[LLMProvider] = None,
) -> str:
    """Generate a job description. Never raises: failures return a placeholder string."""
    if provider is None:
        logger.warning("Job description requested but no AI model is configured")
        return "Error generating description: AI model is not configured (OPENAI_API_KEY missing)"
    
    messages: List[Dict[str, Any]] = [{"role": "user", "content": build_job_description_prompt(facts)}]
    try:
        response = provider.chat(
            messages=messages,
            model=get_model_for_feature(FEATURE),
            temperature=get_temperature_for_feature(FEATURE),
            max_tokens=2000,
        )
    except Exception as e:
        logger.error(f"Error generating job description: {type(e).__name__}: {e}", exc_info=True)
        return f"Error generating description: {e or 'Unknown error'}"
    
    description = (response.content or "").strip()
    if not description:
        logger.warning(f"Empty job description output for '{facts.job_title}'")
        return INVALID_OUTPUT_MESSAGE
    
    logger.info(f"Job description generated: title='{facts.job_title}', length={len(description)}")
    return description
