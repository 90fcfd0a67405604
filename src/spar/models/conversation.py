from enum import Enum
from typing import Dict, List, Tuple
from pydantic import BaseModel, ConfigDict

class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

class ConversationRequest(BaseModel):
    """Role-tagged messages for a single completion call."""
    model_config = ConfigDict(frozen=True)

    messages: Tuple[ChatMessage, ...] = ()

    def to_messages(self) -> List[Dict[str, str]]:
        """Render as an OpenAI chat-completions payload."""
        return [{"role": m.role.value, "content": m.content} for m in self.messages]

    @property
    def roles(self) -> List[MessageRole]:
        return [m.role for m in self.messages]
