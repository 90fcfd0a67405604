import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from ..config import PathManager
from ..models.persona import Persona
from ..models.transcript import Transcript, Turn
from .llm import CompletionService
from .player import AudioPlayer
from .tts import TTSService
from .view_builder import ViewBuilder

logger = logging.getLogger(__name__)

class TurnExecutor:
    """Runs one persona's turn: stream the reply, then speak it."""

    def __init__(
        self,
        llm: CompletionService,
        tts_service: TTSService,
        player: AudioPlayer,
        paths: PathManager,
        view_builder: Optional[ViewBuilder] = None,
        console: Optional[Console] = None,
        default_model: Optional[str] = None
    ):
        self.llm = llm
        self.tts_service = tts_service
        self.player = player
        self.paths = paths
        self.view_builder = view_builder or ViewBuilder()
        self.console = console or Console()
        self.default_model = default_model
        self.audio_files: List[Path] = []

    async def execute(self, persona: Persona, transcript: Transcript) -> Turn:
        """Generate, display and speak one turn.

        Completion errors produce ``Turn.failure(persona)``. Voice errors are
        logged and do not affect the returned turn. The caller appends the
        result to the transcript.
        """
        request = self.view_builder.build(transcript, persona)

        try:
            text = await self._stream_reply(persona, request.to_messages())
        except Exception as e:
            logger.error(f"Completion failed for {persona.name}: {e}")
            self.console.print(f"\n[red]Error from {persona.name}: {escape(str(e))}[/red]")
            return Turn.failure(persona)

        if text:
            await self.speak(persona, text)
        else:
            logger.warning(f"{persona.name} returned an empty response")

        return Turn(speaker=persona.name, text=text)

    async def _stream_reply(self, persona: Persona, messages) -> str:
        fragments: List[str] = []
        self.console.print(f"\n{persona.name}: ", end="", markup=False, emoji=False, highlight=False, soft_wrap=True)

        async for delta in self.llm.stream_chat(messages, model=persona.model or self.default_model):
            fragments.append(delta)
            self.console.print(delta, end="", markup=False, emoji=False, highlight=False, soft_wrap=True)

        self.console.print("\n")
        return "".join(fragments)

    async def speak(self, persona: Persona, text: str) -> Optional[Path]:
        """Synthesize, save and play the text. Returns the saved file, if any."""
        try:
            audio = await self.tts_service.synthesize(text, persona.voice)
            audio_path = self.paths.get_unique_audio_path(
                persona.name, self.tts_service.file_extension
            )
            audio_path.write_bytes(audio)
        except Exception as e:
            logger.error(f"Error in text-to-speech for {persona.name}: {e}")
            self.console.print(f"[red]Error in text-to-speech: {escape(str(e))}[/red]")
            return None

        self.audio_files.append(audio_path)
        self.console.print(f"Audio content written to: {escape(str(audio_path))}")

        try:
            await self.player.play(audio_path)
        except Exception as e:
            logger.error(f"Playback failed for {audio_path}: {e}")
            self.console.print(f"Error playing audio: {escape(str(e))}, file saved to: {escape(str(audio_path))}")

        return audio_path
