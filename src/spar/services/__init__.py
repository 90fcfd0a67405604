"""Core services for running a conversation."""

from .llm import (
    CompletionService,
    OpenRouterService,
    create_completion_service
)
from .tts import (
    TTSService,
    TTSEngine,
    SynthesisError,
    GoogleTTSEngine,
    OpenAITTSEngine,
    create_engine,
    create_tts_service
)
from .player import AudioPlayer, PlatformFamily, create_player
from .view_builder import ViewBuilder, build_request
from .turn_executor import TurnExecutor
from .conversation import (
    ConversationLoop,
    ConversationResult,
    ConversationState,
    parse_exchange_count
)

__all__ = [
    # Completion
    "CompletionService",
    "OpenRouterService",
    "create_completion_service",

    # Speech
    "TTSService",
    "TTSEngine",
    "SynthesisError",
    "GoogleTTSEngine",
    "OpenAITTSEngine",
    "create_engine",
    "create_tts_service",

    # Playback
    "AudioPlayer",
    "PlatformFamily",
    "create_player",

    # Turn management
    "ViewBuilder",
    "build_request",
    "TurnExecutor",
    "ConversationLoop",
    "ConversationResult",
    "ConversationState",
    "parse_exchange_count"
]
