from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

class CompletionService(ABC):
    """Base class for streaming chat completion services."""

    @abstractmethod
    def stream_chat(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None
    ) -> AsyncIterator[str]:
        """Stream the response text fragment by fragment.

        The returned iterator is finite and single-use. Provider errors are
        raised from it while iterating.
        """
        pass

    async def close(self) -> None:
        """Release any client resources."""
        return None
