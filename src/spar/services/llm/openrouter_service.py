import logging
from typing import AsyncIterator, Dict, List, Optional
from openai import AsyncOpenAI
from .base import CompletionService

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

class OpenRouterService(CompletionService):
    """Completion service using OpenRouter's OpenAI-compatible API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gryphe/mythomax-l2-13b",
        base_url: str = OPENROUTER_BASE_URL,
        timeout: Optional[float] = None
    ):
        if not api_key:
            raise ValueError("OpenRouter API key required")
        client_args = {"api_key": api_key, "base_url": base_url}
        if timeout is not None:
            client_args["timeout"] = timeout
        self.client = AsyncOpenAI(**client_args)
        self.model = model

    async def stream_chat(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None
    ) -> AsyncIterator[str]:
        model_name = model or self.model
        logger.debug(f"Streaming {len(messages)} messages to {model_name}")

        try:
            stream = await self.client.chat.completions.create(
                model=model_name,
                messages=messages,
                stream=True
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except Exception as e:
            logger.error(f"OpenRouter API call failed: {e}")
            raise

    async def close(self) -> None:
        await self.client.close()
