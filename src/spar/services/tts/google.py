"""Google Cloud Text-to-Speech engine."""

import asyncio
import logging
from typing import Optional

from google.cloud import texttospeech
from google.oauth2 import service_account

from ...models.persona import SsmlGender, VoiceProfile
from .base import TTSEngine, SynthesisError

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"

GENDER_MAPPINGS = {
    SsmlGender.MALE: texttospeech.SsmlVoiceGender.MALE,
    SsmlGender.FEMALE: texttospeech.SsmlVoiceGender.FEMALE,
    SsmlGender.NEUTRAL: texttospeech.SsmlVoiceGender.NEUTRAL,
}

class GoogleTTSEngine(TTSEngine):
    """TTS using Google Cloud with service account credentials."""

    def __init__(
        self,
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        model_name: Optional[str] = None
    ):
        super().__init__(model_name)
        if not client_email or not private_key:
            raise ValueError("Google Cloud client email and private key required")
        self.client_email = client_email
        # Keys stored in .env files usually carry escaped newlines
        self.private_key = private_key.replace("\\n", "\n")
        self.client: Optional[texttospeech.TextToSpeechClient] = None

    async def load_model(self) -> bool:
        """Create the API client from the service account credentials."""
        try:
            credentials = service_account.Credentials.from_service_account_info({
                "type": "service_account",
                "client_email": self.client_email,
                "private_key": self.private_key,
                "token_uri": TOKEN_URI,
            })
            self.client = texttospeech.TextToSpeechClient(credentials=credentials)
            self.loaded = True
        except Exception as e:
            logger.error(f"Failed to create Google TTS client: {e}")
            self.loaded = False
        return self.loaded

    def build_request(self, text: str, voice: VoiceProfile) -> dict:
        """Assemble synthesize_speech arguments for a voice profile."""
        return {
            "input": texttospeech.SynthesisInput(text=text),
            "voice": texttospeech.VoiceSelectionParams(
                language_code=voice.language_code,
                name=voice.name,
                ssml_gender=GENDER_MAPPINGS[voice.gender],
            ),
            "audio_config": texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.MP3,
                pitch=voice.pitch,
                speaking_rate=voice.speaking_rate,
                volume_gain_db=voice.volume_gain_db,
            ),
        }

    async def synthesize(self, text: str, voice: VoiceProfile) -> bytes:
        """Generate MP3 audio using the Google Cloud API."""
        if self.client is None:
            raise SynthesisError("Google TTS client not loaded")

        request = self.build_request(text, voice)
        logger.debug(f"Requesting Google TTS voice {voice.name} ({voice.language_code})")

        response = await asyncio.get_running_loop().run_in_executor(
            None,
            lambda: self.client.synthesize_speech(**request)
        )

        if not response.audio_content:
            raise SynthesisError("No audio content generated")
        return response.audio_content
