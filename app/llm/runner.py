"""
LLM runner: calls the provider for a feature and returns validated structured output.
"""
import json
import logging
import re
from typing import Optional, Dict, Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.llm.provider import LLMProvider
from app.llm.router import get_model_for_feature, get_temperature_for_feature

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ProviderNotConfigured(Exception):
    """No hosted model is configured for this deployment."""


class InvalidModelOutput(Exception):
    """The model answered but its output does not match the expected schema."""


def parse_json_response(text: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from a model response, tolerating markdown code fences."""
    if not text:
        return None
    fenced = re.search(r'```(?:json)?\s*(\{.*?\})\s*```', text, re.DOTALL)
    candidate = fenced.group(1) if fenced else text
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        # Last resort: outermost braces
        braces = re.search(r'\{.*\}', text, re.DOTALL)
        if not braces:
            return None
        try:
            parsed = json.loads(braces.group())
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def run_structured(
    provider: Optional[LLMProvider],
    feature: str,
    messages: List[Dict[str, Any]],
    output_model: Type[T],
    max_tokens: int = 2000,
) -> T:
    """
    Run one structured-output model call.
    
    Raises:
        ProviderNotConfigured: provider is None
        InvalidModelOutput: response is empty, not JSON, or fails schema validation
        Exception: anything the provider raises is propagated unchanged
    """
    if provider is None:
        raise ProviderNotConfigured("AI model is not configured (OPENAI_API_KEY missing)")
    
    model = get_model_for_feature(feature)
    response = provider.chat(
        messages=messages,
        model=model,
        temperature=get_temperature_for_feature(feature),
        max_tokens=max_tokens,
        json_output=True,
    )
    
    refusal = response.metadata.get("refusal")
    if refusal:
        # Surfaced like a provider block so callers classify it as content filtering
        raise RuntimeError(f"Response blocked by model: {refusal}")
    if response.finish_reason == "content_filter":
        raise RuntimeError("Response blocked by SAFETY content filter")
    
    parsed = parse_json_response(response.content)
    if parsed is None:
        logger.warning(f"Unparseable {feature} output: {response.content[:100]!r}")
        raise InvalidModelOutput(f"{feature}: model returned no parseable JSON output")
    
    try:
        result = output_model.model_validate(parsed)
    except ValidationError as e:
        logger.warning(f"{feature} output failed schema validation: {e}")
        raise InvalidModelOutput(f"{feature}: model output did not match the schema") from e
    
    logger.info(
        f"LLM run completed: feature={feature}, model={model}, "
        f"tokens={response.tokens_in + response.tokens_out}"
    )
    return result
