"""
Tests for CV scoring: prompt construction, failure classification and fallbacks.
"""
import pytest

from app.llm.runner import ProviderNotConfigured
from app.services.cv_analysis_service import (
    AnalyzeCvInput,
    analyze_cv_against_job,
    build_cv_analysis_messages,
    classify_analysis_failure,
    mime_type_from_data_uri,
)

PDF_URI = "data:application/pdf;base64,JVBERi0xLjQK"
DOCX_URI = "data:application/vnd.openxmlformats-officedocument.wordprocessingml.document;base64,UEsDBBQ="


def make_input(**overrides):
    values = dict(
        job_title="Senior Platform Engineer",
        job_description="Own and scale our Kubernetes platform on AWS.",
        job_technologies="Kubernetes,Terraform,AWS",
        job_experience_level="Senior",
    )
    values.update(overrides)
    return AnalyzeCvInput(**values)


# ============================================
# Prompt construction
# ============================================

def test_text_content_takes_priority_over_data_uri():
    """With extracted text present, the prompt carries the text and no file reference."""
    messages = build_cv_analysis_messages(make_input(
        cv_text_content="Six years of Kubernetes on AWS.",
        cv_data_uri=PDF_URI,
    ))
    user_content = messages[-1]["content"]

    assert isinstance(user_content, str)
    assert "Six years of Kubernetes on AWS." in user_content
    assert "data:application/pdf" not in user_content
    assert "Senior Platform Engineer" in user_content


def test_blank_text_falls_back_to_file_part():
    messages = build_cv_analysis_messages(make_input(cv_text_content="   ", cv_data_uri=DOCX_URI))
    parts = messages[-1]["content"]

    assert isinstance(parts, list)
    file_parts = [p for p in parts if p["type"] == "file"]
    assert len(file_parts) == 1
    assert file_parts[0]["file"]["file_data"] == DOCX_URI
    assert file_parts[0]["file"]["filename"] == "cv.docx"


def test_mime_type_from_data_uri():
    assert mime_type_from_data_uri(PDF_URI) == "application/pdf"
    assert mime_type_from_data_uri("not a data uri") is None
    assert mime_type_from_data_uri(None) is None


# ============================================
# Failure classification
# ============================================

def test_unsupported_mime_type_names_the_type():
    result = classify_analysis_failure(
        "Request failed: mimeType application/msword is not supported",
        None,
        "data:application/msword;base64,0M8R4KGx",
    )
    assert result.score == 0
    assert "application/msword" in result.summary
    assert len(result.weaknesses) == 1
    assert "application/msword" in result.weaknesses[0]


def test_unsupported_mime_type_wins_over_safety():
    result = classify_analysis_failure("mimeType not supported; SAFETY", None, PDF_URI)
    assert "not supported" in result.summary
    assert "safety" not in result.summary.lower()


@pytest.mark.parametrize("message", ["Candidate blocked for SAFETY", "Response blocked by model: refusal"])
def test_safety_block(message):
    result = classify_analysis_failure(message, "some text", None)
    assert result.score == 0
    assert "safety filters" in result.summary


def test_raw_file_attempt_without_text():
    result = classify_analysis_failure("upstream timeout", None, PDF_URI)
    assert result.score == 0
    assert "may be incomplete" in result.summary
    assert "raw CV file" in result.summary


def test_no_usable_content():
    result = classify_analysis_failure("upstream timeout", "", "garbage")
    assert result.score == 0
    assert "no usable CV content" in result.summary


def test_generic_failure_carries_error_text():
    result = classify_analysis_failure("connection reset by peer", "Some CV text", None)
    assert result.score == 0
    assert result.summary == "Error during AI analysis: connection reset by peer"


# ============================================
# Service
# ============================================

def test_valid_output_is_returned(fake_provider_cls):
    provider = fake_provider_cls({
        "score": 91,
        "summary": "Excellent fit.",
        "strengths": ["Kubernetes", "AWS", "Terraform"],
        "weaknesses": ["No GCP"],
    })
    result = analyze_cv_against_job(make_input(cv_text_content="Kubernetes on AWS"), provider=provider)

    assert result.score == 91
    assert result.strengths == ["Kubernetes", "AWS", "Terraform"]
    assert provider.calls[0]["json_output"] is True


def test_markdown_fenced_json_is_accepted(fake_provider_cls):
    provider = fake_provider_cls(
        '```json\n{"score": 40, "summary": "Partial fit.", "strengths": [], "weaknesses": ["Junior"]}\n```'
    )
    result = analyze_cv_against_job(make_input(cv_text_content="cv"), provider=provider)
    assert result.score == 40


@pytest.mark.parametrize("content", [
    "I cannot score this CV.",
    {"score": 140, "summary": "Too high", "strengths": [], "weaknesses": []},
    {"summary": "missing score"},
])
def test_invalid_output_gives_fixed_fallback(fake_provider_cls, content):
    result = analyze_cv_against_job(make_input(cv_text_content="cv"), provider=fake_provider_cls(content))

    assert result.score == 0
    assert result.summary == "AI analysis failed to produce a valid output."
    assert result.strengths == []
    assert len(result.weaknesses) == 1


def test_provider_error_is_classified_not_raised(fake_provider_cls):
    provider = fake_provider_cls(error=RuntimeError("mimeType application/msword not supported"))
    result = analyze_cv_against_job(
        make_input(cv_data_uri="data:application/msword;base64,0M8R4KGx"),
        provider=provider,
    )
    assert result.score == 0
    assert "application/msword" in result.weaknesses[0]


def test_refusal_is_treated_as_safety_block(fake_provider_cls):
    provider = fake_provider_cls('{"score": 10}', refusal="I can't help with that.")
    result = analyze_cv_against_job(make_input(cv_text_content="cv"), provider=provider)
    assert "safety filters" in result.summary


def test_content_filter_finish_is_treated_as_safety_block(fake_provider_cls):
    provider = fake_provider_cls("", finish_reason="content_filter")
    result = analyze_cv_against_job(make_input(cv_text_content="cv"), provider=provider)
    assert "safety filters" in result.summary


def test_no_content_skips_model_call(fake_provider_cls):
    provider = fake_provider_cls({"score": 99, "summary": "x", "strengths": [], "weaknesses": []})
    result = analyze_cv_against_job(make_input(), provider=provider)

    assert result.score == 0
    assert "no usable CV content" in result.summary
    assert provider.calls == []


def test_missing_provider_is_reported_in_summary():
    result = analyze_cv_against_job(make_input(cv_text_content="cv"), provider=None)
    assert result.score == 0
    assert "not configured" in result.summary


def test_run_structured_requires_provider():
    from app.llm.runner import run_structured
    from app.services.cv_analysis_service import AnalyzeCvOutput

    with pytest.raises(ProviderNotConfigured):
        run_structured(None, "cv_analysis", [], AnalyzeCvOutput)
