import io
from pathlib import Path
from typing import List, Optional

import pytest
from rich.console import Console

from spar.config import PathManager
from spar.models.persona import VoiceProfile
from spar.services.llm import CompletionService
from spar.services.player import AudioPlayer
from spar.services.tts import TTSEngine, TTSService
from spar.services.turn_executor import TurnExecutor

FAKE_AUDIO = b"ID3\x04fake-mp3"

class FakeCompletion(CompletionService):
    """Replays scripted replies in call order.

    Each script is a list of fragments; an Exception anywhere in the list (or
    as the whole script) is raised at that point of the stream.
    """

    def __init__(self, scripts):
        self.scripts = list(scripts)
        self.calls = []

    async def stream_chat(self, messages, model=None):
        self.calls.append({"messages": messages, "model": model})
        script = self.scripts.pop(0) if self.scripts else []
        if isinstance(script, Exception):
            raise script
        for fragment in script:
            if isinstance(fragment, Exception):
                raise fragment
            yield fragment

class FakeEngine(TTSEngine):
    def __init__(self, audio: bytes = FAKE_AUDIO, error: Optional[Exception] = None):
        super().__init__()
        self.audio = audio
        self.error = error
        self.requests = []

    async def load_model(self) -> bool:
        self.loaded = True
        return True

    async def synthesize(self, text: str, voice: VoiceProfile) -> bytes:
        self.requests.append((text, voice))
        if self.error:
            raise self.error
        return self.audio

class FakePlayer(AudioPlayer):
    def __init__(self, error: Optional[Exception] = None):
        super().__init__(Console(file=io.StringIO()))
        self.error = error
        self.played: List[Path] = []

    async def play(self, audio_path: Path) -> bool:
        self.played.append(audio_path)
        if self.error:
            raise self.error
        return True

@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)

@pytest.fixture
def paths(tmp_path):
    return PathManager(tmp_path)

@pytest.fixture
def engine():
    return FakeEngine()

@pytest.fixture
def tts_service(engine):
    service = TTSService()
    service.add_engine(engine, default=True)
    return service

@pytest.fixture
def player():
    return FakePlayer()

@pytest.fixture
def make_executor(tts_service, player, paths, console):
    def _make(scripts, **kwargs):
        return TurnExecutor(
            llm=FakeCompletion(scripts),
            tts_service=kwargs.get("tts_service", tts_service),
            player=kwargs.get("player", player),
            paths=kwargs.get("paths", paths),
            console=console,
            default_model=kwargs.get("default_model")
        )
    return _make
