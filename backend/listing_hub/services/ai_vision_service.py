"""
AI vision service — product content suggestions from product photos.

Every model call follows the same shape: build a prompt, send it with the
image as inline data, clean the text response, parse it as JSON.
The service is constructed even when no Gemini key is configured; in that
case every model-calling operation raises NotConfiguredError.
"""
import json
import logging
import re
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from listing_hub.clients.gemini_client import GeminiClient
from listing_hub.core.exceptions import (
    ListingHubException,
    MalformedAIResponseError,
    NotConfiguredError,
    RemoteAPIError,
    ValidationError,
)
from listing_hub.schemas.products import ImageAsset, ProductAnalysis

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\n?")
_JSON_SPAN = re.compile(r"\{[\s\S]*\}|\[[\s\S]*\]")

ANALYSIS_PROMPT = """You are an expert e-commerce product analyst. Analyze this product image and provide detailed information in JSON format.

IMPORTANT: Return ONLY valid JSON, no markdown formatting, no code blocks, no extra text.

Required JSON structure:
{
  "title": "SEO-friendly product title (max 60 characters, catchy and descriptive)",
  "description": "Detailed product description (2-3 paragraphs, 150-200 words, persuasive and highlight benefits)",
  "features": ["feature 1", "feature 2", "feature 3", "feature 4", "feature 5"],
  "category": "main product category",
  "suggestedTags": ["tag1", "tag2", "tag3", "tag4", "tag5"],
  "confidence": 0.95
}

Guidelines:
1. Title should be catchy, include key product attributes (color, material, type)
2. Description should be persuasive, professional, and SEO-optimized
3. List 5-8 key features that are visible or implied from the image
4. Suggest 5-10 relevant searchable tags
5. Confidence score (0-1) based on image clarity and recognizability
6. Make it compelling for online shoppers

Return ONLY the JSON object, nothing else."""

ALTERNATIVE_TITLES_PROMPT = """Current product title: "{current_title}"

Based on this product image, generate 5 alternative SEO-friendly product titles. Each should:
- Be unique and catchy
- Include key product attributes
- Be 40-60 characters
- Be optimized for search engines

Return as JSON array: ["title1", "title2", "title3", "title4", "title5"]
Return ONLY the JSON array, no markdown, no extra text."""

ENHANCE_DESCRIPTION_PROMPT = """Current product description: "{current_description}"

Based on the product image, enhance this description to:
- Make it more persuasive and engaging
- Add sensory details visible in the image
- Highlight unique selling points
- Optimize for SEO
- Keep it 150-250 words
- Make it professional and compelling

Return only the enhanced description text, no extra formatting."""

CONNECTION_TEST_PROMPT = 'Say "AI Vision is working!"'


def clean_json_response(response: str) -> str:
    """Strip code fences and surrounding prose from a model response.

    Idempotent: an already-clean JSON string comes back unchanged.
    """
    cleaned = _CODE_FENCE.sub("", response).strip()
    match = _JSON_SPAN.search(cleaned)
    if match:
        cleaned = match.group(0)
    return cleaned


def parse_json_response(response: str) -> Any:
    cleaned = clean_json_response(response)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedAIResponseError(f"{exc.msg} in {cleaned[:200]!r}") from exc


class AIVisionService:
    """Gemini-backed product image analysis."""

    def __init__(self, gemini: Optional[GeminiClient]) -> None:
        self._gemini = gemini
        if gemini is None:
            logger.warning("Gemini API key not configured. AI Vision features will not work.")
            logger.warning("Get your free API key at: https://aistudio.google.com/app/apikey")

    def is_configured(self) -> bool:
        return self._gemini is not None

    def _require_model(self) -> GeminiClient:
        if self._gemini is None:
            raise NotConfiguredError()
        return self._gemini

    async def _generate(self, prompt: str, image_bytes: Optional[bytes] = None, mime_type: Optional[str] = None) -> str:
        gemini = self._require_model()
        try:
            return await gemini.generate_content(prompt, image_bytes, mime_type)
        except ListingHubException:
            raise
        except Exception as exc:
            logger.error(f"Gemini request failed: {exc}")
            raise RemoteAPIError("Gemini", f"AI Vision request failed: {exc}") from exc

    async def analyze_product_image(self, image_bytes: bytes, mime_type: str) -> ProductAnalysis:
        """Suggest title, description, features, category and tags for one image."""
        self._require_model()
        logger.info(f"Analyzing product image with AI Vision ({len(image_bytes)} bytes, {mime_type})")

        text = await self._generate(ANALYSIS_PROMPT, image_bytes, mime_type)
        payload = parse_json_response(text)
        if not isinstance(payload, dict):
            raise MalformedAIResponseError(f"expected a JSON object, got {type(payload).__name__}")

        try:
            analysis = ProductAnalysis.model_validate(payload)
        except PydanticValidationError as exc:
            raise MalformedAIResponseError(str(exc)) from exc
        logger.info(f"Analysis confidence: {analysis.confidence * 100:.0f}%")
        logger.info(f"Generated title: {analysis.title}")
        return analysis

    async def analyze_multiple_images(self, images: Sequence[ImageAsset]) -> ProductAnalysis:
        """Analyze the first (main) image of a set."""
        self._require_model()
        if not images:
            raise ValidationError("Please upload at least one image")
        if len(images) > 1:
            logger.info(f"Using first image as primary ({len(images)} total images)")
        main = images[0]
        return await self.analyze_product_image(main.content, main.mime_type)

    async def generate_alternative_titles(self, current_title: str, image_bytes: bytes, mime_type: str) -> List[str]:
        prompt = ALTERNATIVE_TITLES_PROMPT.format(current_title=current_title)
        payload = parse_json_response(await self._generate(prompt, image_bytes, mime_type))
        if not isinstance(payload, list):
            raise MalformedAIResponseError(f"expected a JSON array, got {type(payload).__name__}")
        return [str(title) for title in payload]

    async def enhance_description(self, current_description: str, image_bytes: bytes, mime_type: str) -> str:
        prompt = ENHANCE_DESCRIPTION_PROMPT.format(current_description=current_description)
        text = await self._generate(prompt, image_bytes, mime_type)
        return text.strip()

    async def test_connection(self) -> dict:
        """Probe the model; reports failure instead of raising."""
        if not self.is_configured():
            return {
                "success": False,
                "message": "AI Vision not configured. Add GEMINI_API_KEY to .env",
            }
        try:
            text = await self._generate(CONNECTION_TEST_PROMPT)
        except ListingHubException as exc:
            logger.error(f"AI Vision test failed: {exc}")
            return {"success": False, "message": f"AI Vision test failed: {exc}"}

        working = "working" in text
        return {
            "success": working,
            "message": "AI Vision is working!" if working else "AI Vision connection issue",
        }
