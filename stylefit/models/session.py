"""Session state models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from .image import EncodedImage


class SessionStatus(str, Enum):
    """Lifecycle of the single in-flight operation."""
    
    IDLE = "idle"
    GENERATING = "generating"
    EDITING = "editing"
    FAILED = "failed"


class ImageSlot(str, Enum):
    """Upload slots shown on the page."""
    
    SUBJECT = "subject"
    GARMENT_1 = "garment_1"
    GARMENT_2 = "garment_2"


class TryOnSession(BaseModel):
    """Complete in-memory state for one browser session."""
    
    session_id: str = Field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))
    
    # Inputs
    subject: EncodedImage | None = None
    garment_1: EncodedImage | None = None
    garment_2: EncodedImage | None = None
    
    # Output
    result: EncodedImage | None = None
    commentary: str | None = None
    
    # Status
    status: SessionStatus = SessionStatus.IDLE
    error: str | None = None
    
    started_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    
    @property
    def garments(self) -> list[EncodedImage]:
        """Uploaded garments in slot order (base layer first)."""
        return [g for g in (self.garment_1, self.garment_2) if g is not None]
    
    @computed_field
    @property
    def is_busy(self) -> bool:
        return self.status in (SessionStatus.GENERATING, SessionStatus.EDITING)
    
    @computed_field
    @property
    def can_generate(self) -> bool:
        """Whether the try-on action should be enabled."""
        return not self.is_busy and self.subject is not None and bool(self.garments)
    
    @computed_field
    @property
    def can_refine(self) -> bool:
        """Whether the follow-up edit form should be enabled."""
        return not self.is_busy and self.result is not None
    
    def set_image(self, slot: ImageSlot, image: EncodedImage | None) -> None:
        setattr(self, slot.value, image)
        self.touch()
    
    def touch(self) -> None:
        self.updated_at = datetime.now()
