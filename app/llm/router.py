"""
Model router for selecting the model used by each AI feature.
"""
from app.core.config import OPENAI_MODEL

# Feature -> model mapping; None means the configured default
MODEL_ROUTING = {
    "cv_analysis": None,
    "interview_questions": None,
    "job_description": None,
}

# Feature -> sampling temperature
TEMPERATURE_ROUTING = {
    "cv_analysis": 0.2,
    "interview_questions": 0.7,
    "job_description": 0.8,
}


def get_model_for_feature(feature: str) -> str:
    """
    Get the model identifier for a feature.
    
    Args:
        feature: Feature name ("cv_analysis", "interview_questions", "job_description")
        
    Returns:
        Model identifier string
    """
    return MODEL_ROUTING.get(feature) or OPENAI_MODEL


def get_temperature_for_feature(feature: str) -> float:
    return TEMPERATURE_ROUTING.get(feature, 0.7)
