"""Abstract base class for summarization providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..cache.models import VideoMetadata


@dataclass
class SummaryResult:
    """Summary produced by an LLM provider.

    Token counts are zero when the provider does not report them.
    """

    summary: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class Summarizer(ABC):
    """Abstract base class for transcript summarizers.

    All providers must inherit from this class and implement summarize().
    """

    @abstractmethod
    async def summarize(
        self, transcript: str, metadata: VideoMetadata | None = None
    ) -> SummaryResult:
        """Summarize a transcript as markdown.

        Args:
            transcript: Full transcript text
            metadata: Optional title/channel/duration used in the prompt

        Returns:
            Summary text and the name of the model that produced it

        Raises:
            SummarizerError: If the provider fails or returns nothing
        """
        pass
