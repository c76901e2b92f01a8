"""Session orchestration."""

from .session_controller import SessionController, TryOnTranslator

__all__ = ["SessionController", "TryOnTranslator"]
