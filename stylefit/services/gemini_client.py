"""Gemini API client for virtual try-on image generation and editing."""

import logging
from typing import Any

from google import genai
from google.genai import types

from ..errors import TransportError, ValidationError
from ..models import EncodedImage, GenerationResult
from ..models.image import DEFAULT_RESULT_MIME_TYPE
from ..prompts import TRYON_PROMPT

logger = logging.getLogger(__name__)

MAX_GARMENTS = 2


def image_part(image: EncodedImage) -> types.Part:
    """Wrap an uploaded image as an inline-data content part."""
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


def build_tryon_contents(
    subject: EncodedImage,
    garments: list[EncodedImage],
) -> list[types.Part]:
    """Build the ordered parts for a first try-on: subject, garments, prompt."""
    if not 1 <= len(garments) <= MAX_GARMENTS:
        raise ValidationError(
            f"Expected 1 to {MAX_GARMENTS} clothing items, got {len(garments)}."
        )
    return [
        image_part(subject),
        *(image_part(g) for g in garments),
        types.Part.from_text(text=TRYON_PROMPT),
    ]


def build_refine_contents(prior: EncodedImage, instruction: str) -> list[types.Part]:
    """Build the ordered parts for an edit: prior result, then the instruction."""
    return [image_part(prior), types.Part.from_text(text=instruction)]


def build_generation_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        response_modalities=["IMAGE", "TEXT"],
    )


def parse_generation_response(response: Any) -> GenerationResult:
    """Extract the first image part and the first text part of a reply.
    
    Only the first candidate is considered. Later parts of the same kind
    are ignored. A reply with no candidates or no parts yields an empty
    result rather than an error.
    """
    image: EncodedImage | None = None
    text: str | None = None
    
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    parts = getattr(content, "parts", None) or []
    
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            if image is None:
                image = EncodedImage(
                    data=inline_data.data,
                    mime_type=inline_data.mime_type or DEFAULT_RESULT_MIME_TYPE,
                )
        elif getattr(part, "text", None):
            if text is None:
                text = part.text
        
        if image is not None and text is not None:
            break
    
    if image is None:
        logger.warning("Model response did not contain an image part")
    
    return GenerationResult(image=image, text=text)


class GeminiTryOnClient:
    """Translates try-on and edit actions into Gemini generate_content calls.
    
    The underlying ``genai.Client`` is passed in so tests can substitute a
    fake without network access.
    """
    
    def __init__(self, client: genai.Client, model: str):
        self.client = client
        self.model = model
    
    @classmethod
    def from_api_key(cls, api_key: str, model: str) -> "GeminiTryOnClient":
        """Create a client backed by a real ``genai.Client``."""
        return cls(genai.Client(api_key=api_key), model)
    
    async def initiate(
        self,
        subject: EncodedImage,
        garments: list[EncodedImage],
    ) -> GenerationResult:
        """Generate a try-on image of the subject wearing the garments.
        
        Args:
            subject: Photo of the person
            garments: One or two clothing images, base layer first
            
        Returns:
            GenerationResult with the first image and text parts of the reply
            
        Raises:
            ValidationError: If the garment count is out of range
            TransportError: If the model call fails for any reason
        """
        contents = build_tryon_contents(subject, garments)
        logger.debug(
            "Requesting try-on: subject=%s, garments=%d",
            subject.mime_type,
            len(garments),
        )
        return await self._generate(contents, "Failed to generate virtual try-on image.")
    
    async def refine(self, prior: EncodedImage, instruction: str) -> GenerationResult:
        """Apply a free-text edit to a previously generated image.
        
        Args:
            prior: The most recent generated image, used as the sole input
            instruction: What to change
            
        Returns:
            GenerationResult with the first image and text parts of the reply
            
        Raises:
            TransportError: If the model call fails for any reason
        """
        contents = build_refine_contents(prior, instruction)
        logger.debug("Requesting edit: %r", instruction[:80])
        return await self._generate(contents, "Failed to edit virtual try-on image.")
    
    async def _generate(self, contents: list[types.Part], failure_message: str) -> GenerationResult:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=build_generation_config(),
            )
        except Exception as e:
            logger.exception("Error calling Gemini API (%s)", self.model)
            raise TransportError(failure_message) from e
        
        return parse_generation_response(response)
