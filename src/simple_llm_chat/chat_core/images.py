"""Image attachments."""

import base64
from pathlib import Path
from typing import Union

from .exceptions import ImageLoadError
from .logger import get_logger

logger = get_logger(__name__)


def load_image_base64(path: Union[str, Path]) -> str:
    """
    Reads an image file and returns its contents base64 encoded.

    The bytes are sent as they are; no format conversion takes place.

    Args:
        path: Path to the image file.

    Returns:
        The base64 encoded file contents.

    Raises:
        ImageLoadError: If the path is empty or the file cannot be read.
    """
    if not str(path).strip():
        raise ImageLoadError("Image path cannot be empty.")

    image_path = Path(path).expanduser()
    if not image_path.is_file():
        raise ImageLoadError(f"Image file not found: {image_path}")

    try:
        data = image_path.read_bytes()
    except OSError as exc:
        raise ImageLoadError(f"Could not read image file '{image_path}': {exc}") from exc

    logger.debug("Loaded image %s (%d bytes).", image_path, len(data))
    return base64.b64encode(data).decode("ascii")
