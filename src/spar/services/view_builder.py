"""Projection of the shared transcript into one persona's chat request.

Each persona sees the same transcript differently:

* The first persona in speaking order receives every entry, topic included,
  as a ``user`` message. Its own earlier turns are labelled ``user`` too, so
  it loses track of which lines were its own. This matches the existing
  experience and is kept as is.
* The second persona receives the topic with an instruction to argue, then
  its own turns as ``assistant`` and the opponent's as ``user``, and finally
  the opponent's most recent turn as the trailing ``user`` message.

The system message always comes first.
"""

import logging
from typing import List, Optional

from ..models.conversation import ChatMessage, ConversationRequest, MessageRole
from ..models.persona import Persona
from ..models.persona_profiles import DEFAULT_REGISTRY, PersonaRegistry
from ..models.transcript import Transcript

logger = logging.getLogger(__name__)

ARGUMENT_NOTE = " (Note: Have a heated argument about this)"

class ViewBuilder:
    """Builds per-persona conversation requests from a transcript."""

    def __init__(self, registry: Optional[PersonaRegistry] = None):
        self.registry = registry or DEFAULT_REGISTRY

    def build(self, transcript: Transcript, persona: Persona) -> ConversationRequest:
        messages = [ChatMessage(role=MessageRole.SYSTEM, content=persona.system_instruction)]

        if self.registry.is_first(persona):
            messages.extend(self._first_view(transcript))
        else:
            messages.extend(self._second_view(transcript, persona))

        logger.debug(f"Built {len(messages)} messages for {persona.name}")
        return ConversationRequest(messages=tuple(messages))

    def _first_view(self, transcript: Transcript) -> List[ChatMessage]:
        return [
            ChatMessage(role=MessageRole.USER, content=entry.text)
            for entry in transcript.entries()
        ]

    def _second_view(self, transcript: Transcript, persona: Persona) -> List[ChatMessage]:
        opponent = self.registry.other(persona)
        entries = transcript.entries()
        messages: List[ChatMessage] = []

        if transcript.topic is not None:
            messages.append(ChatMessage(
                role=MessageRole.USER,
                content=transcript.topic + ARGUMENT_NOTE
            ))

        turns = [e for e in entries if not e.is_topic]
        latest = transcript.last_turn_by(opponent.name)

        # The opponent's latest turn is re-sent last below
        if turns and turns[-1].speaker == opponent.name:
            turns = turns[:-1]

        for entry in turns:
            role = MessageRole.ASSISTANT if entry.speaker == persona.name else MessageRole.USER
            messages.append(ChatMessage(role=role, content=entry.text))

        if latest is not None:
            messages.append(ChatMessage(role=MessageRole.USER, content=latest.text))

        return messages

def build_request(
    transcript: Transcript,
    persona: Persona,
    registry: Optional[PersonaRegistry] = None
) -> ConversationRequest:
    """Build the request the given persona's completion call should receive."""
    return ViewBuilder(registry).build(transcript, persona)
