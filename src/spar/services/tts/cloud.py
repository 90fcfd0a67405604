"""OpenAI speech engine."""

import asyncio
import logging
import os
from typing import Optional
from openai import OpenAI

from ...models.persona import SsmlGender, VoiceProfile
from .base import TTSEngine

logger = logging.getLogger(__name__)

class OpenAITTSEngine(TTSEngine):
    """TTS using the OpenAI speech API."""

    VOICE_MAPPINGS = {
        SsmlGender.MALE: 'onyx',
        SsmlGender.FEMALE: 'nova',
        SsmlGender.NEUTRAL: 'alloy'
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None
    ):
        super().__init__(model_name)
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key not provided")

        self.client = OpenAI(api_key=self.api_key)

    async def load_model(self) -> bool:
        """No model loading needed for API-based TTS."""
        self.loaded = True
        return True

    async def synthesize(self, text: str, voice: VoiceProfile) -> bytes:
        """Generate MP3 audio using the OpenAI API."""
        voice_id = self.VOICE_MAPPINGS[voice.gender]

        response = await asyncio.get_running_loop().run_in_executor(
            None,
            lambda: self.client.audio.speech.create(
                model=self.model_name or "tts-1",
                voice=voice_id,
                input=text,
                response_format="mp3",
                speed=voice.speaking_rate
            )
        )
        return response.content
