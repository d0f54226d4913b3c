"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict, Any
from openai import OpenAI, APIError

from app.core.config import OPENAI_API_KEY
from app.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""
    
    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.client = OpenAI(api_key=self.api_key)
        logger.info("OpenAI provider initialized")
    
    def chat(
        self,
        messages: list[Dict[str, Any]],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion."""
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 2000,
                **kwargs
            )
        except APIError as e:
            logger.error(f"OpenAI API error: {e}", exc_info=True)
            raise
        
        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            model=model,
            finish_reason=choice.finish_reason,
            metadata={"refusal": getattr(choice.message, "refusal", None)},
        )


def get_default_provider() -> Optional[LLMProvider]:
    """Build the configured provider, or None when no API key is set."""
    try:
        return OpenAIProvider()
    except ValueError:
        logger.warning("OPENAI_API_KEY not configured - AI features will return fallback results")
        return None
