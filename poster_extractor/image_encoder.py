"""
Image encoding for transfer to the vision model.
"""

import base64
import binascii
import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from .exceptions import ImageEncodingError


logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/jpeg"


class EncodedImage(BaseModel):
    """Base64 image payload ready to be sent to the model."""
    data: str = Field(..., description="Base64 payload without data URI prefix")
    media_type: str = Field(DEFAULT_MEDIA_TYPE, description="MIME type of the image")

    def to_data_uri(self) -> str:
        """Re-add the data URI prefix, e.g. for an <img> preview."""
        return f"data:{self.media_type};base64,{self.data}"

    def decode(self) -> bytes:
        """Return the original image bytes."""
        return base64.b64decode(self.data)

    @classmethod
    def from_data_uri(cls, value: str) -> "EncodedImage":
        """Build an EncodedImage from a data URI or a bare base64 string."""
        media_type = DEFAULT_MEDIA_TYPE
        if value.startswith("data:") and "," in value:
            header = value.split(",", 1)[0]
            media_type = header[len("data:"):].split(";", 1)[0] or DEFAULT_MEDIA_TYPE
        return cls(data=strip_data_uri(value), media_type=media_type)


def strip_data_uri(value: str) -> str:
    """Remove a ``data:<mime>;base64,`` prefix, keeping only the payload."""
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def detect_media_type(data: bytes, filename: Optional[str] = None) -> str:
    """
    Detect the MIME type of image bytes.

    Args:
        data: Raw image bytes
        filename: Original filename, used when Pillow cannot identify the data

    Returns:
        MIME type string
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            media_type = Image.MIME.get(img.format or "")
            if media_type:
                return media_type
    except (UnidentifiedImageError, OSError) as e:
        logger.debug(f"Pillow could not identify image: {e}")

    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed and guessed.startswith("image/"):
            return guessed

    logger.warning(f"Unknown image type for {filename or 'upload'}, assuming {DEFAULT_MEDIA_TYPE}")
    return DEFAULT_MEDIA_TYPE


def encode_image_bytes(data: bytes, filename: Optional[str] = None) -> EncodedImage:
    """
    Encode raw image bytes to base64.

    Args:
        data: Raw image bytes
        filename: Original filename, if known

    Returns:
        EncodedImage with the base64 payload and detected media type
    """
    if not data:
        raise ImageEncodingError(f"Image is empty: {filename or 'upload'}")

    try:
        payload = base64.b64encode(data).decode("ascii")
    except (TypeError, binascii.Error) as e:
        raise ImageEncodingError(f"Cannot encode image: {e}") from e

    return EncodedImage(data=payload, media_type=detect_media_type(data, filename))


def encode_image_file(image_path: Union[str, Path]) -> EncodedImage:
    """
    Read an image file and encode it to base64.

    Args:
        image_path: Path to the image file

    Returns:
        EncodedImage for the file contents
    """
    path = Path(image_path)
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error(f"Error reading image {path}: {e}")
        raise ImageEncodingError(f"Cannot read image file: {path}") from e

    return encode_image_bytes(data, path.name)
