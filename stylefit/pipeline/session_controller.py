"""Session orchestration for try-on and follow-up edits."""

import logging
from typing import Protocol

from ..errors import EmptyResultError, ValidationError
from ..models import EncodedImage, GenerationResult, ImageSlot, SessionStatus, TryOnSession

logger = logging.getLogger(__name__)

MISSING_IMAGES_MESSAGE = "Please upload a person and at least one clothing item."
NO_RESULT_MESSAGE = "Generate a try-on image before requesting edits."
EMPTY_INSTRUCTION_MESSAGE = "Please describe the change you want to make."
EMPTY_TRYON_MESSAGE = (
    "The AI model did not return an image or text. "
    "Please try again with different images."
)
EMPTY_EDIT_MESSAGE = "The AI model did not return an updated image or text."
UNKNOWN_TRYON_ERROR = "An unknown error occurred during image generation."
UNKNOWN_EDIT_ERROR = "An unknown error occurred during image editing."


class TryOnTranslator(Protocol):
    """Anything that can turn images into a GenerationResult."""
    
    async def initiate(
        self,
        subject: EncodedImage,
        garments: list[EncodedImage],
    ) -> GenerationResult: ...
    
    async def refine(self, prior: EncodedImage, instruction: str) -> GenerationResult: ...


class SessionController:
    """Owns the session state and runs one model call per user action.
    
    Flow:
    1. Check the action's preconditions (no network call on failure)
    2. Move to GENERATING or EDITING before the first await
    3. Call the translator once
    4. Apply the result, or record the error, and settle in IDLE or FAILED
    
    While a call is in flight any further trigger is a no-op.
    """
    
    def __init__(self, translator: TryOnTranslator, session: TryOnSession | None = None):
        self.translator = translator
        self.session = session or TryOnSession()
    
    def set_image(self, slot: ImageSlot, image: EncodedImage) -> TryOnSession:
        """Store an uploaded image, replacing whatever the slot held."""
        self.session.set_image(slot, image)
        logger.info(
            "Stored %s image (%s, %d bytes)", slot.value, image.mime_type, image.size
        )
        return self.session
    
    def clear_image(self, slot: ImageSlot) -> TryOnSession:
        self.session.set_image(slot, None)
        logger.info("Cleared %s image", slot.value)
        return self.session
    
    def reset(self) -> TryOnSession:
        """Discard every image, result and message.
        
        A reset while a call is in flight is ignored.
        """
        if self.session.is_busy:
            return self.session
        self.session = TryOnSession()
        logger.info("Session reset: %s", self.session.session_id)
        return self.session
    
    async def generate(self) -> bool:
        """Run a first try-on with the current subject and garments.
        
        Returns:
            False if another operation was already in flight, True otherwise
            (including when validation or the model call failed; the
            outcome is recorded on the session).
        """
        session = self.session
        if session.is_busy:
            logger.info("Ignoring try-on request: %s in progress", session.status.value)
            return False
        
        subject = session.subject
        garments = session.garments
        if subject is None or not garments:
            self._fail(ValidationError(MISSING_IMAGES_MESSAGE), UNKNOWN_TRYON_ERROR)
            return True
        
        self._enter(SessionStatus.GENERATING)
        session.result = None
        session.commentary = None
        
        try:
            result = await self.translator.initiate(subject, garments)
            self._apply(result, EMPTY_TRYON_MESSAGE)
        except Exception as e:
            self._fail(e, UNKNOWN_TRYON_ERROR)
        
        return True
    
    async def refine(self, instruction: str) -> bool:
        """Apply a follow-up edit to the current result image.
        
        Commentary from the previous call persists unless the model
        returns new text.
        
        Returns:
            False if another operation was already in flight, True otherwise.
        """
        session = self.session
        if session.is_busy:
            logger.info("Ignoring edit request: %s in progress", session.status.value)
            return False
        
        prior = session.result
        instruction = (instruction or "").strip()
        if prior is None:
            self._fail(ValidationError(NO_RESULT_MESSAGE), UNKNOWN_EDIT_ERROR)
            return True
        if not instruction:
            self._fail(ValidationError(EMPTY_INSTRUCTION_MESSAGE), UNKNOWN_EDIT_ERROR)
            return True
        
        self._enter(SessionStatus.EDITING)
        
        try:
            result = await self.translator.refine(prior, instruction)
            self._apply(result, EMPTY_EDIT_MESSAGE)
        except Exception as e:
            self._fail(e, UNKNOWN_EDIT_ERROR)
        
        return True
    
    def _enter(self, status: SessionStatus) -> None:
        self.session.status = status
        self.session.error = None
        self.session.touch()
        logger.info("Session %s: %s", self.session.session_id, status.value)
    
    def _apply(self, result: GenerationResult, empty_message: str) -> None:
        if result.is_empty:
            raise EmptyResultError(empty_message)
        
        if result.image is not None:
            self.session.result = result.image
        if result.text is not None:
            self.session.commentary = result.text
        
        self.session.status = SessionStatus.IDLE
        self.session.touch()
        logger.info(
            "Session %s: result applied (image=%s, text=%s)",
            self.session.session_id,
            result.image is not None,
            result.text is not None,
        )
    
    def _fail(self, error: Exception, fallback: str) -> None:
        message = str(error) or fallback
        self.session.error = message
        self.session.status = SessionStatus.FAILED
        self.session.touch()
        logger.warning("Session %s failed: %s", self.session.session_id, message)
