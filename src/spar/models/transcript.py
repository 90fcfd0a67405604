import threading
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict
from .persona import Persona

FAILURE_MARKER = "failed to respond"

class Turn(BaseModel):
    """One complete utterance by a persona."""
    model_config = ConfigDict(frozen=True)

    speaker: str
    text: str
    failed: bool = False

    @classmethod
    def failure(cls, persona: Persona) -> "Turn":
        """Sentinel turn recorded when a persona's generation fails."""
        return cls(
            speaker=persona.name,
            text=f"[{persona.name} {FAILURE_MARKER} due to an error]",
            failed=True
        )

    @property
    def is_failure(self) -> bool:
        return self.failed or FAILURE_MARKER in self.text

class TranscriptEntry(BaseModel):
    """A transcript line; speaker is None for the seeding topic."""
    model_config = ConfigDict(frozen=True)

    speaker: Optional[str] = None
    text: str

    @property
    def is_topic(self) -> bool:
        return self.speaker is None

class Transcript:
    """Append-only log of the topic followed by every committed turn."""

    def __init__(self):
        self._entries: List[TranscriptEntry] = []
        self._lock = threading.Lock()

    @classmethod
    def seed(cls, topic: str) -> "Transcript":
        if not topic or not topic.strip():
            raise ValueError("Topic cannot be empty")
        transcript = cls()
        transcript._entries.append(TranscriptEntry(speaker=None, text=topic))
        return transcript

    def append(self, turn: Turn) -> None:
        if not turn.text:
            raise ValueError(f"Cannot append an empty turn from {turn.speaker}")
        with self._lock:
            self._entries.append(TranscriptEntry(speaker=turn.speaker, text=turn.text))

    def entries(self) -> Tuple[TranscriptEntry, ...]:
        """Snapshot of all entries in order."""
        with self._lock:
            return tuple(self._entries)

    @property
    def topic(self) -> Optional[str]:
        entries = self.entries()
        if entries and entries[0].is_topic:
            return entries[0].text
        return None

    def turns(self) -> Tuple[TranscriptEntry, ...]:
        """Entries spoken by a persona, topic excluded."""
        return tuple(e for e in self.entries() if not e.is_topic)

    def last_turn_by(self, speaker: str) -> Optional[TranscriptEntry]:
        for entry in reversed(self.entries()):
            if entry.speaker == speaker:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)
