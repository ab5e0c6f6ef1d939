"""Gemini LLM service implementation."""

from google import genai

from yorisoi.config import GeminiConfig
from yorisoi.exceptions import LLMServiceError
from yorisoi.infrastructure.interfaces.llm_service import LLMService
from yorisoi.logging import setup_logging

logger = setup_logging()


class GeminiLLMService(LLMService):
    """LLM service implementation using Google Gemini."""

    def __init__(self, client: genai.Client, config: GeminiConfig):
        self._client = client
        self._config = config

    def generate_json(self, prompt: str) -> str:
        """
        Generates a JSON response for the prompt.

        Args:
            prompt: Instructions and transcript material.

        Returns:
            The raw response text.

        Raises:
            LLMServiceError: If the Gemini API call fails or returns no text.
        """
        try:
            response = self._client.models.generate_content(
                model=self._config.model_name,
                contents=prompt,
                config={
                    "response_mime_type": "application/json",
                    "temperature": self._config.temperature,
                    "top_p": self._config.top_p,
                    "max_output_tokens": self._config.max_output_tokens,
                },
            )
        except Exception as e:
            logger.exception("Gemini API call failed")
            raise LLMServiceError(f"Gemini generation failed: {e}", cause=e) from e

        if not response.text:
            logger.error("Gemini returned empty response")
            raise LLMServiceError("Gemini returned empty response")
        logger.info("LLM generation completed", extra={"chars": len(response.text)})
        return response.text
