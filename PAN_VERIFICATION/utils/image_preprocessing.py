import io
import logging
import numpy as np
from PIL import Image, UnidentifiedImageError
from typing import Optional
from core.config import OCR_MAX_IMAGE_PIXELS, PREPROCESS_CONTRAST

logger = logging.getLogger(__name__)


class ImagePreprocessingError(Exception):
    pass


def contrast_factor(contrast: float) -> float:
    """Contrast on a 0-100 scale to the multiplier of the linear stretch."""
    if not 0 <= contrast <= 100:
        raise ValueError("contrast must be between 0 and 100")
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def preprocess_image(
    image_bytes: bytes,
    contrast: float = PREPROCESS_CONTRAST,
    max_pixels: Optional[int] = None,
) -> bytes:
    """
    Grayscale + contrast stretch ahead of OCR.

    Each pixel becomes the mean of its R, G and B channels, pushed away from
    mid-grey by the contrast factor and clamped to 0-255. The value is written
    back into all three colour channels, alpha is kept. Returns PNG bytes of
    the same dimensions.

    Images with more than `max_pixels` pixels (OCR_MAX_IMAGE_PIXELS by
    default) are refused before they are decoded.
    """
    factor = contrast_factor(contrast)
    max_pixels = OCR_MAX_IMAGE_PIXELS if max_pixels is None else max_pixels

    try:
        source = Image.open(io.BytesIO(image_bytes))
        width, height = source.size
        if width * height > max_pixels:
            logger.warning(f"Image refused for preprocessing: {width}x{height} pixels")
            raise ImagePreprocessingError(f"Image too large: {width}x{height} pixels")
        source.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.error(f"Image preprocessing failed: {e}")
        raise ImagePreprocessingError("Failed to load image for preprocessing") from e

    keep_alpha = _has_alpha(source)
    source = source.convert("RGBA" if keep_alpha else "RGB")

    # channel sum fits in uint16; the stretch itself runs in float32
    rgb = np.asarray(source)[..., :3]
    avg = rgb.sum(axis=2, dtype=np.uint16).astype(np.float32) / 3
    value = np.clip(np.rint(factor * (avg - 128) + 128), 0, 255).astype(np.uint8)

    gray = Image.fromarray(value)
    bands = (gray, gray, gray) + ((source.getchannel("A"),) if keep_alpha else ())
    result = Image.merge("RGBA" if keep_alpha else "RGB", bands)

    buffer = io.BytesIO()
    result.save(buffer, format="PNG")
    return buffer.getvalue()
