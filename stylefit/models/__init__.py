"""Data models for the StyleFit try-on app."""

from .image import EncodedImage, GenerationResult
from .session import ImageSlot, SessionStatus, TryOnSession

__all__ = [
    "EncodedImage",
    "GenerationResult",
    "ImageSlot",
    "SessionStatus",
    "TryOnSession",
]
