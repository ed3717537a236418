"""Upload storage in the shared working directory."""

import base64
import binascii
import logging
from typing import Optional

from .config import RunnerConfig, get_config
from .errors import ValidationError
from .sanitize import sanitize_filename

logger = logging.getLogger("ffmpeg_tools")


class UploadStore:
    """Persists uploaded bytes under sanitized names in the upload directory."""

    def __init__(self, config: Optional[RunnerConfig] = None):
        self.config = config or get_config()

    def save_file(self, filename: str, content: str) -> str:
        """Decode base64 ``content`` and write it under a sanitized name.

        Args:
            filename: Name supplied by the caller.
            content: Base64 encoded file body.

        Returns:
            The sanitized filename the content was stored under.

        Raises:
            ValidationError: If ``content`` is not valid base64.
        """
        try:
            data = base64.b64decode("".join(content.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Invalid base64 content: {e}") from e

        root = self.config.ensure_upload_dir()
        safe_name = sanitize_filename(filename)
        (root / safe_name).write_bytes(data)

        logger.info("Stored upload %r as %s (%d bytes)", filename, safe_name, len(data))
        return safe_name

