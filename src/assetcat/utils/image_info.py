"""Pixel dimension probing for uploaded images."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

_logger = logging.getLogger(__name__)


def image_dimensions(path: Path) -> Optional[Tuple[int, int]]:
    """Return ``(width, height)`` of the image at *path*, or ``None``.

    Only the header is read; Pillow loads pixel data lazily.
    """

    try:
        with Image.open(path) as image:
            return image.size
    except (UnidentifiedImageError, OSError) as exc:
        _logger.warning("[IMAGE-INFO] cannot read dimensions of %s: %s", path, exc)
        return None


__all__ = ["image_dimensions"]
