"""Base classes for TTS functionality."""

from typing import Optional, List
import logging
from abc import ABC, abstractmethod

from ...models.persona import VoiceProfile

logger = logging.getLogger(__name__)

class SynthesisError(RuntimeError):
    """Raised when a TTS engine produces no usable audio."""

class TTSEngine(ABC):
    """Base class for TTS engines."""

    # Encoding of the bytes returned by synthesize()
    file_extension = ".mp3"

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name
        self.loaded = False

    @abstractmethod
    async def load_model(self) -> bool:
        """Prepare the engine (create clients, load credentials)."""
        pass

    @abstractmethod
    async def synthesize(self, text: str, voice: VoiceProfile) -> bytes:
        """Generate speech from text and return the encoded audio."""
        pass

class TTSService:
    """High-level TTS service managing multiple engines."""

    def __init__(self):
        self.engines: List[TTSEngine] = []
        self.default_engine: Optional[TTSEngine] = None

    def add_engine(self, engine: TTSEngine, default: bool = False) -> None:
        """Add a TTS engine to the service."""
        self.engines.append(engine)
        if default or not self.default_engine:
            self.default_engine = engine

    def _select_engine(self, engine: Optional[TTSEngine] = None) -> TTSEngine:
        tts_engine = engine or self.default_engine
        if not tts_engine:
            raise ValueError("No TTS engines available")
        return tts_engine

    @property
    def file_extension(self) -> str:
        return self._select_engine().file_extension

    async def synthesize(
        self,
        text: str,
        voice: VoiceProfile,
        engine: Optional[TTSEngine] = None
    ) -> bytes:
        """
        Synthesize speech using specified or default engine.

        Args:
            text: Text to synthesize
            voice: Voice profile of the speaking persona
            engine: Specific engine to use, or None for default

        Returns:
            Encoded audio bytes

        Raises:
            SynthesisError: if the engine cannot be loaded or returns no audio
        """
        tts_engine = self._select_engine(engine)

        # Ensure model is loaded
        if not tts_engine.loaded:
            if not await tts_engine.load_model():
                raise SynthesisError("Failed to load TTS model")

        audio = await tts_engine.synthesize(text, voice)
        if not audio:
            raise SynthesisError("No audio content generated")

        logger.debug(f"Synthesized {len(audio)} bytes with voice {voice.name}")
        return audio
