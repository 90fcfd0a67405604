from typing import Optional
from ...config import LLMProvider
from .base import CompletionService
from .openrouter_service import OpenRouterService, OPENROUTER_BASE_URL

def create_completion_service(
    provider: LLMProvider,
    model_name: Optional[str] = None,
    api_key: Optional[str] = None,
    **kwargs
) -> CompletionService:
    """Create appropriate completion service based on provider."""
    if provider == LLMProvider.OPENROUTER:
        if not api_key:
            raise ValueError("OpenRouter API key required")
        return OpenRouterService(
            api_key=api_key,
            model=model_name or "gryphe/mythomax-l2-13b",
            base_url=kwargs.get('base_url', OPENROUTER_BASE_URL),
            timeout=kwargs.get('timeout')
        )
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")

__all__ = [
    'LLMProvider',
    'CompletionService',
    'OpenRouterService',
    'create_completion_service',
    'OPENROUTER_BASE_URL'
]
