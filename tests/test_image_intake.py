"""Unit tests for EncodedImage - upload validation and encoding."""

import base64

import pytest

from stylefit.errors import ValidationError
from stylefit.models import EncodedImage, GenerationResult


class TestFromUpload:
    """Tests for creating images from raw uploads."""
    
    def test_accepts_image_mime_type(self, minimal_png_bytes):
        """Image content types are accepted and bytes kept as-is."""
        image = EncodedImage.from_upload(minimal_png_bytes, "image/png", "me.png")
        
        assert image.data == minimal_png_bytes
        assert image.mime_type == "image/png"
        assert image.filename == "me.png"
        assert image.size == len(minimal_png_bytes)
    
    @pytest.mark.parametrize("mime_type", ["text/plain", "application/pdf", "video/mp4", "", None])
    def test_rejects_non_image_mime_type(self, minimal_png_bytes, mime_type):
        """Anything not starting with image/ is rejected."""
        with pytest.raises(ValidationError):
            EncodedImage.from_upload(minimal_png_bytes, mime_type)
    
    def test_mime_type_check_is_case_insensitive(self, minimal_png_bytes):
        image = EncodedImage.from_upload(minimal_png_bytes, "IMAGE/JPEG")
        
        assert image.mime_type == "image/jpeg"
    
    def test_rejects_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            EncodedImage.from_upload(b"", "image/png")
    
    def test_rejects_oversized_file(self):
        with pytest.raises(ValidationError, match="too large"):
            EncodedImage.from_upload(b"x" * 2048, "image/png", max_bytes=1024)
    
    def test_image_is_immutable(self, minimal_png_bytes):
        image = EncodedImage.from_upload(minimal_png_bytes, "image/png")
        
        with pytest.raises(Exception):
            image.mime_type = "image/gif"


class TestDataUrls:
    """Tests for data URL encoding and decoding."""
    
    def test_from_data_url(self, minimal_png_bytes):
        """Base64 data URLs are decoded with their MIME type."""
        b64 = base64.b64encode(minimal_png_bytes).decode()
        
        image = EncodedImage.from_data_url(f"data:image/png;base64,{b64}")
        
        assert image.data == minimal_png_bytes
        assert image.mime_type == "image/png"
    
    def test_from_data_url_rejects_non_image(self):
        b64 = base64.b64encode(b"hello").decode()
        
        with pytest.raises(ValidationError):
            EncodedImage.from_data_url(f"data:text/plain;base64,{b64}")
    
    def test_from_data_url_rejects_raw_base64(self):
        with pytest.raises(ValidationError):
            EncodedImage.from_data_url("iVBORw0KGgo=")
    
    def test_from_data_url_rejects_bad_base64(self):
        with pytest.raises(ValidationError, match="base64"):
            EncodedImage.from_data_url("data:image/png;base64,not base64!!")
    
    def test_to_data_url(self, minimal_png_bytes):
        image = EncodedImage(data=minimal_png_bytes, mime_type="image/png")
        
        data_url = image.to_data_url()
        
        assert data_url.startswith("data:image/png;base64,")
        assert base64.b64decode(data_url.split(",", 1)[1]) == minimal_png_bytes


class TestGenerationResult:
    
    def test_empty_when_nothing_returned(self):
        assert GenerationResult().is_empty
    
    def test_not_empty_with_text_only(self):
        assert not GenerationResult(text="Sorry, I can't do that").is_empty
    
    def test_not_empty_with_image_only(self):
        image = EncodedImage(data=b"x", mime_type="image/png")
        
        assert not GenerationResult(image=image).is_empty
