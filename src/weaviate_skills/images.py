"""Image encoding helpers for blob properties and vision prompts."""

import base64
import mimetypes
from pathlib import Path
from typing import Union

DEFAULT_MIME_TYPE = "image/png"


def encode_image(path: Union[str, Path]) -> str:
    """Read an image file and return its base64 encoding."""
    with open(path, "rb") as f:
        return base64.b64encode(f.read()).decode("utf-8")


def image_data_uri(path: Union[str, Path]) -> str:
    """Inline an image file as a ``data:`` URI."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = DEFAULT_MIME_TYPE
    return f"data:{mime_type};base64,{encode_image(path)}"
