# Test fixtures and configuration
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from google.genai import types

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from stylefit.models import EncodedImage, GenerationResult  # noqa: E402


@pytest.fixture
def minimal_png_bytes():
    """Minimal valid PNG image bytes."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # 1x1 dimensions
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,
        0xDE, 0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41,  # IDAT chunk
        0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
        0x00, 0x00, 0x03, 0x00, 0x01, 0x00, 0x05, 0xFE,
        0xD4, 0xAA, 0x00, 0x00, 0x00, 0x00, 0x49, 0x45,  # IEND chunk
        0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
    ])


@pytest.fixture
def subject_image(minimal_png_bytes):
    return EncodedImage(data=minimal_png_bytes, mime_type="image/png", filename="subject.png")


@pytest.fixture
def shirt_image():
    return EncodedImage(data=b"shirt-bytes", mime_type="image/jpeg", filename="shirt.jpg")


@pytest.fixture
def jacket_image():
    return EncodedImage(data=b"jacket-bytes", mime_type="image/webp", filename="jacket.webp")


@pytest.fixture
def fake_translator():
    """Translator double that never touches the network."""
    translator = MagicMock()
    translator.initiate = AsyncMock(
        return_value=GenerationResult(
            image=EncodedImage(data=b"B1", mime_type="image/png"),
            text="Looks great",
        )
    )
    translator.refine = AsyncMock(
        return_value=GenerationResult(
            image=EncodedImage(data=b"B2", mime_type="image/png"),
        )
    )
    return translator


def make_response(*parts: types.Part) -> types.GenerateContentResponse:
    """Build a single-candidate Gemini response from parts."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=list(parts)))
        ]
    )


def image_response_part(data: bytes, mime_type: str = "image/png") -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


@pytest.fixture
def fake_genai_client():
    """Stand-in for google.genai.Client with a mocked async generate_content."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=make_response(
            image_response_part(b"generated"),
            types.Part(text="Here you go"),
        )
    )
    return client
