"""Image and generation result models."""

import base64
import binascii

from pydantic import BaseModel, ConfigDict, computed_field

from ..errors import ValidationError


DEFAULT_RESULT_MIME_TYPE = "image/png"


def is_image_mime_type(mime_type: str | None) -> bool:
    """Check that a content type names an image (``image/*``)."""
    return bool(mime_type) and mime_type.lower().startswith("image/")


class EncodedImage(BaseModel):
    """An uploaded or generated image held in memory.
    
    The bytes are kept exactly as received; nothing is resized or
    re-encoded.
    """
    
    model_config = ConfigDict(frozen=True)
    
    data: bytes
    mime_type: str
    filename: str | None = None
    
    @classmethod
    def from_upload(
        cls,
        data: bytes,
        mime_type: str | None,
        filename: str | None = None,
        max_bytes: int | None = None,
    ) -> "EncodedImage":
        """Create an image from raw upload bytes.
        
        Args:
            data: Raw file contents
            mime_type: Content type reported by the browser
            filename: Original file name, if known
            max_bytes: Optional upper bound on the file size
            
        Raises:
            ValidationError: If the content type is not ``image/*``, the
                file is empty, or it exceeds ``max_bytes``.
        """
        if not is_image_mime_type(mime_type):
            raise ValidationError(
                f"Unsupported file type '{mime_type or 'unknown'}'. Please upload an image."
            )
        if not data:
            raise ValidationError("The uploaded file is empty.")
        if max_bytes is not None and len(data) > max_bytes:
            raise ValidationError(
                f"Image is too large (limit is {max_bytes // (1024 * 1024)} MB)."
            )
        return cls(data=data, mime_type=mime_type.lower(), filename=filename)
    
    @classmethod
    def from_data_url(cls, data_url: str, filename: str | None = None) -> "EncodedImage":
        """Create an image from a ``data:image/...;base64,`` URL."""
        if not data_url.startswith("data:") or "," not in data_url:
            raise ValidationError("Expected a base64 data URL.")
        
        # Split "data:image/png;base64" from the payload
        header, encoded = data_url.split(",", 1)
        mime_type = header[len("data:"):].split(";", 1)[0]
        
        try:
            raw_bytes = base64.b64decode(encoded, validate=True)
        except binascii.Error as e:
            raise ValidationError("Image data is not valid base64.") from e
        
        return cls.from_upload(raw_bytes, mime_type, filename)
    
    @computed_field
    @property
    def size(self) -> int:
        """Size of the image in bytes."""
        return len(self.data)
    
    def to_base64(self) -> str:
        """Encode the image bytes for transport."""
        return base64.b64encode(self.data).decode("utf-8")
    
    def to_data_url(self) -> str:
        """Encode the image as a data URL for display in the browser."""
        return f"data:{self.mime_type};base64,{self.to_base64()}"


class GenerationResult(BaseModel):
    """The (image, text) pair returned by one model call."""
    
    image: EncodedImage | None = None
    text: str | None = None
    
    @property
    def is_empty(self) -> bool:
        return self.image is None and self.text is None
