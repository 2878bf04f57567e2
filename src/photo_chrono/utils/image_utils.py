"""影像 metadata 讀取與預覽圖產生工具。"""

from __future__ import annotations

import io
from typing import Optional, Tuple

from PIL import Image, ImageOps

PREVIEW_MEDIA_TYPE = "image/jpeg"


def _register_heif_opener() -> None:
    try:
        from pillow_heif import register_heif_opener

        register_heif_opener()
    except ImportError:
        return


def get_exif_datetime_original(data: bytes, name: str = "(bytes)", logger=None) -> Optional[str]:
    _register_heif_opener()
    try:
        with Image.open(io.BytesIO(data)) as image:
            exif_bytes = image.info.get("exif")
            if not exif_bytes:
                return None
        import piexif

        exif_dict = piexif.load(exif_bytes)
        exif_ifd = exif_dict.get("Exif", {})
        value = exif_ifd.get(piexif.ExifIFD.DateTimeOriginal)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="ignore")
        return str(value)
    except Exception as exc:
        if logger is not None:
            logger.warning(f"無法讀取 EXIF: {name} ({exc})")
        return None


def scaled_size(size: Tuple[int, int], max_dimension: int) -> Tuple[int, int]:
    """等比例縮放，使長邊不超過 max_dimension；不放大。"""
    width, height = size
    longest = max(width, height)
    if longest <= max_dimension:
        return width, height
    ratio = max_dimension / float(longest)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def build_preview(
    data: bytes,
    max_dimension: int,
    quality: int = 85,
    name: str = "(bytes)",
    logger=None,
) -> Optional[Tuple[bytes, Tuple[int, int]]]:
    _register_heif_opener()
    try:
        with Image.open(io.BytesIO(data)) as image:
            image = ImageOps.exif_transpose(image)
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")
            target = scaled_size(image.size, max_dimension)
            if target != image.size:
                image = image.resize(target, Image.Resampling.LANCZOS)
            buffer = io.BytesIO()
            image.save(buffer, "JPEG", quality=quality)
            return buffer.getvalue(), image.size
    except Exception as exc:
        if logger is not None:
            logger.warning(f"無法產生預覽圖: {name} ({exc})")
        return None
