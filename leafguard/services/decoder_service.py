from __future__ import annotations

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from leafguard.core.errors import DecodeError, UploadTooLarge, ValidationError
from leafguard.core.policies import UploadPolicy
from leafguard.core.schemas import ImageBuffer


logger = logging.getLogger(__name__)


class ImageDecoder:
    """
    Pillow-backed decoder producing RGBA ImageBuffers.
    Size limits are enforced before Pillow ever sees the bytes.
    """

    def __init__(self, policy: UploadPolicy | None = None):
        self.policy = policy or UploadPolicy()

    def validate(self, data: bytes, declared_size: int | None = None) -> None:
        limit = self.policy.max_bytes
        if declared_size is not None and declared_size > limit:
            raise UploadTooLarge(f"File too large: {declared_size} bytes (limit {limit})")
        if len(data) > limit:
            raise UploadTooLarge(f"File too large: {len(data)} bytes (limit {limit})")
        if not data:
            raise ValidationError("Empty upload")

    def decode(self, data: bytes, declared_size: int | None = None) -> ImageBuffer:
        self.validate(data, declared_size)

        try:
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
                if width * height > self.policy.max_pixels:
                    raise DecodeError(
                        f"Image too large: {width}x{height} pixels (limit {self.policy.max_pixels})"
                    )
                image.load()
                rgba = image.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Unsupported or oversized image: {e}") from e
        except (OSError, SyntaxError, ValueError) as e:
            raise DecodeError(f"Corrupt image data: {e}") from e

        pixels = np.asarray(rgba, dtype=np.uint8).copy()
        width, height = rgba.size

        logger.debug("Decoded %sx%s image (%s bytes)", width, height, len(data))
        return ImageBuffer(width=width, height=height, pixels=pixels)
