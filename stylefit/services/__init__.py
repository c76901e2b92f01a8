"""External service clients."""

from .gemini_client import GeminiTryOnClient, parse_generation_response

__all__ = ["GeminiTryOnClient", "parse_generation_response"]
