"""
Tests for log sanitizing.
"""
from app.core.logging_config import sanitize_log_data


def test_log_sanitizing_hides_secrets_and_cv_content():

    cv_text = "Casey Candidate, 12 Main Street, casey@example.com, six years of Kubernetes"
    sanitized = sanitize_log_data({
        "job_title": "Platform Engineer",
        "cv_text_content": cv_text,
        "cv_data_uri": None,
        "stripe": {"stripe_secret_key": "sk_live_abc"},
        "openai_api_key": None,
    })

    assert sanitized["job_title"] == "Platform Engineer"
    assert "12 Main Street" not in sanitized["cv_text_content"]
    assert f"<{len(cv_text)} chars>" in sanitized["cv_text_content"]
    assert sanitized["cv_data_uri"] is None
    assert sanitized["stripe"]["stripe_secret_key"] == "***REDACTED***"
    assert sanitized["openai_api_key"] is None
