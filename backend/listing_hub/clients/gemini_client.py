"""
Google Gemini client — multimodal LLM wrapper for product image analysis.
"""
import logging
from typing import Optional

import google.generativeai as genai

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin async wrapper around the Google Generative AI SDK."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model)
        self._model_name = model
        logger.info(f"GeminiClient initialised with model={model}")

    @property
    def model_name(self) -> str:
        return self._model_name

    async def generate_content(
        self,
        prompt: str,
        image_bytes: Optional[bytes] = None,
        mime_type: Optional[str] = None,
    ) -> str:
        """Generate text from a prompt, optionally with one inline image.

        Args:
            prompt: The full prompt to send to Gemini.
            image_bytes: Raw image content sent as inline data.
            mime_type: MIME type of `image_bytes`.

        Returns:
            The generated text response.
        """
        parts: list = [prompt]
        if image_bytes is not None:
            parts.append({"mime_type": mime_type or "image/jpeg", "data": image_bytes})
        response = await self._model.generate_content_async(parts)
        return response.text
