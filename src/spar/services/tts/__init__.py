"""Text-to-Speech service package."""

from typing import Optional

from ...config import TTSProvider
from .base import TTSEngine, TTSService, SynthesisError
from .google import GoogleTTSEngine
from .cloud import OpenAITTSEngine

# Mapping of provider to engine class
PROVIDER_MAP = {
    TTSProvider.GOOGLE: GoogleTTSEngine,
    TTSProvider.OPENAI: OpenAITTSEngine
}

def create_engine(
    provider: TTSProvider,
    model_name: Optional[str] = None,
    **kwargs
) -> TTSEngine:
    """Create appropriate TTS engine based on provider."""
    if provider not in PROVIDER_MAP:
        raise ValueError(f"Unsupported TTS provider: {provider}")

    engine_class = PROVIDER_MAP[provider]
    if provider == TTSProvider.GOOGLE:
        return engine_class(
            client_email=kwargs.get("client_email"),
            private_key=kwargs.get("private_key"),
            model_name=model_name
        )
    return engine_class(model_name=model_name, api_key=kwargs.get("api_key"))

def create_tts_service(
    provider: TTSProvider,
    model_name: Optional[str] = None,
    **kwargs
) -> TTSService:
    """Create a TTS service with the provider's engine as default."""
    service = TTSService()
    service.add_engine(create_engine(provider, model_name, **kwargs), default=True)
    return service

__all__ = [
    "TTSEngine",
    "TTSService",
    "SynthesisError",
    "TTSProvider",
    "GoogleTTSEngine",
    "OpenAITTSEngine",
    "create_engine",
    "create_tts_service",
    "PROVIDER_MAP"
]
