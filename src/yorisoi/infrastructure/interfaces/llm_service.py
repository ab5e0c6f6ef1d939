"""Abstract interface for LLM service operations."""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """Abstract base class for structured text-generation backends."""

    @abstractmethod
    def generate_json(self, prompt: str) -> str:
        """
        Generates text constrained to a JSON response.

        The returned text usually, but not reliably, holds one JSON object,
        possibly wrapped in a code fence.

        Args:
            prompt: The full prompt, instructions and input included.

        Returns:
            The raw generated text.

        Raises:
            LLMServiceError: If the LLM call fails or returns nothing.
        """
