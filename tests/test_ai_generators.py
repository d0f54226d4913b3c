"""
Tests for interview question and job description generation.
"""
from app.services.interview_question_service import (
    InterviewQuestionInput,
    build_interview_messages,
    generate_interview_questions,
)
from app.services.job_description_service import (
    INVALID_OUTPUT_MESSAGE,
    JobDescriptionInput,
    build_job_description_prompt,
    generate_job_description,
)


def question_input():
    return InterviewQuestionInput(
        job_title="Senior Platform Engineer",
        job_description="Own and scale our Kubernetes platform on AWS.",
        candidate_strengths=["Kubernetes operations"],
        candidate_weaknesses=["Limited Terraform exposure"],
    )


def job_facts(**overrides):
    values = dict(
        job_title="Senior Platform Engineer",
        platform="Kubernetes",
        technologies="Kubernetes, Terraform, AWS",
        experience_level="Senior",
        location="Remote",
        key_responsibilities_summary="Run the production clusters and mentor engineers.",
    )
    values.update(overrides)
    return JobDescriptionInput(**values)


# ============================================
# Interview questions
# ============================================

def test_prompt_includes_strengths_and_weaknesses():
    prompt = build_interview_messages(question_input())[0]["content"]
    assert "Kubernetes operations" in prompt
    assert "Limited Terraform exposure" in prompt
    assert "constructively" in prompt


def test_questions_are_capped_per_category(fake_provider_cls):
    provider = fake_provider_cls({
        "technical_questions": [f"T{i}" for i in range(8)],
        "behavioral_questions": [f"B{i}" for i in range(5)],
        "situational_questions": ["S1", "S2"],
    })
    result = generate_interview_questions(question_input(), provider=provider)

    assert len(result.technical_questions) == 5
    assert len(result.behavioral_questions) == 3
    assert result.situational_questions == ["S1", "S2"]


def test_provider_failure_returns_placeholders(fake_provider_cls):
    provider = fake_provider_cls(error=RuntimeError("rate limited"))
    result = generate_interview_questions(question_input(), provider=provider)

    assert result.technical_questions == ["Error generating technical questions: rate limited"]
    assert result.behavioral_questions == ["Error generating behavioral questions: rate limited"]
    assert result.situational_questions == ["Error generating situational questions: rate limited"]


def test_malformed_output_returns_placeholders(fake_provider_cls):
    provider = fake_provider_cls({"technical_questions": [], "behavioral_questions": ["B"]})
    result = generate_interview_questions(question_input(), provider=provider)

    assert len(result.technical_questions) == 1
    assert result.technical_questions[0].startswith("Error generating technical questions")


# ============================================
# Job description
# ============================================

def test_sections_are_requested_in_order():
    prompt = build_job_description_prompt(job_facts(company_culture_snippet="Small, remote-first team."))

    order = ["introduction", "Role Overview", "Key Responsibilities:", "Required Skills",
             "Preferred Qualifications", "Working With Us", "call to action"]
    positions = [prompt.index(section) for section in order]
    assert positions == sorted(positions)


def test_optional_sections_are_omitted():
    prompt = build_job_description_prompt(job_facts())
    assert "Working With Us" not in prompt
    assert "Contract Type" not in prompt
    assert "Relevant Modules" not in prompt


def test_description_is_returned(fake_provider_cls):
    provider = fake_provider_cls("  **Senior Platform Engineer**\n\nJoin us...  ")
    assert generate_job_description(job_facts(), provider=provider) == "**Senior Platform Engineer**\n\nJoin us..."


def test_empty_output_gives_placeholder(fake_provider_cls):
    assert generate_job_description(job_facts(), provider=fake_provider_cls("   ")) == INVALID_OUTPUT_MESSAGE


def test_failure_gives_placeholder(fake_provider_cls):
    provider = fake_provider_cls(error=RuntimeError("model overloaded"))
    assert generate_job_description(job_facts(), provider=provider) == "Error generating description: model overloaded"


def test_missing_provider_gives_placeholder():
    assert generate_job_description(job_facts(), provider=None).startswith("Error generating description:")
