from .persona import Persona, VoiceProfile, SsmlGender
from .persona_profiles import (
    MAVERICK,
    BLAZE,
    DEFAULT_REGISTRY,
    PersonaRegistry,
    get_persona
)
from .transcript import Turn, Transcript, TranscriptEntry
from .conversation import ChatMessage, ConversationRequest, MessageRole

__all__ = [
    "Persona",
    "VoiceProfile",
    "SsmlGender",
    "MAVERICK",
    "BLAZE",
    "DEFAULT_REGISTRY",
    "PersonaRegistry",
    "get_persona",
    "Turn",
    "Transcript",
    "TranscriptEntry",
    "ChatMessage",
    "ConversationRequest",
    "MessageRole"
]
