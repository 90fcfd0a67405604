import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from ..models.persona_profiles import DEFAULT_REGISTRY, PersonaRegistry
from ..models.transcript import Transcript, Turn
from .turn_executor import TurnExecutor

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGES = 5

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

def parse_exchange_count(raw: Optional[str], default: int = DEFAULT_EXCHANGES) -> int:
    """Read the leading integer of user input.

    Blank, non-numeric, zero or negative input gives the default.
    """
    match = _LEADING_INT_RE.match(raw or "")
    if not match:
        return default
    value = int(match.group(1))
    return value if value > 0 else default

class ConversationState(str, Enum):
    AWAITING_TOPIC = "awaiting_topic"
    AWAITING_EXCHANGE_COUNT = "awaiting_exchange_count"
    RUNNING = "running"
    ENDED = "ended"

@dataclass
class ConversationResult:
    transcript: Transcript
    rounds_completed: int
    max_rounds: int
    halted: bool
    audio_dir: Path
    audio_files: List[Path] = field(default_factory=list)

class ConversationLoop:
    """Alternates the two personas for a fixed number of rounds."""

    def __init__(
        self,
        executor: TurnExecutor,
        audio_dir: Path,
        registry: Optional[PersonaRegistry] = None,
        console: Optional[Console] = None
    ):
        self.executor = executor
        self.audio_dir = audio_dir
        self.registry = registry or DEFAULT_REGISTRY
        self.console = console or Console()
        self.state = ConversationState.AWAITING_TOPIC
        self.transcript: Optional[Transcript] = None
        self.max_rounds = 0
        self.round = 0

    def _require(self, state: ConversationState) -> None:
        if self.state != state:
            raise RuntimeError(f"Expected state {state.value}, conversation is {self.state.value}")

    def set_topic(self, topic: str) -> None:
        self._require(ConversationState.AWAITING_TOPIC)
        self.transcript = Transcript.seed(topic)
        self.state = ConversationState.AWAITING_EXCHANGE_COUNT

    def set_exchanges(self, count: int) -> None:
        self._require(ConversationState.AWAITING_EXCHANGE_COUNT)
        if count < 1:
            raise ValueError("Exchange count must be at least 1")
        self.max_rounds = count
        self.state = ConversationState.RUNNING

    async def run(self) -> ConversationResult:
        """Run every round, stopping early if the second persona fails."""
        self._require(ConversationState.RUNNING)
        first, second = self.registry.speaking_order
        halted = False
        self.round = 0

        self.console.print("\n--- Starting AI Conversation ---\n")
        logger.info(f"Starting conversation: {self.max_rounds} rounds")

        while self.round < self.max_rounds:
            first_turn = await self.executor.execute(first, self.transcript)
            if not first_turn.text:
                first_turn = Turn.failure(first)
            # Only the second persona's failure ends the conversation
            self.transcript.append(first_turn)

            second_turn = await self.executor.execute(second, self.transcript)
            if not second_turn.text or second_turn.is_failure:
                logger.error(f"{second.name} failed in round {self.round + 1}, stopping")
                self.console.print(
                    f"[red]Error getting response from {second.name}. "
                    f"Please check your OpenRouter API key and try again.[/red]"
                )
                halted = True
                break

            self.transcript.append(second_turn)
            self.round += 1
            logger.info(f"Completed round {self.round}/{self.max_rounds}")

        self.state = ConversationState.ENDED
        self.console.print("\n--- Conversation Ended ---")
        self.console.print(f"Audio files are saved in the '{escape(str(self.audio_dir))}' directory")

        return ConversationResult(
            transcript=self.transcript,
            rounds_completed=self.round,
            max_rounds=self.max_rounds,
            halted=halted,
            audio_dir=self.audio_dir,
            audio_files=list(self.executor.audio_files)
        )
