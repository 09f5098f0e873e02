"""图片编码写入：格式对应的模式归一化与保存。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from PIL import Image

from imgwork.core.exceptions import ImageWriteError, UnsupportedFormatError

LOGGER = logging.getLogger(__name__)

SUFFIX_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".webp": "WEBP",
    ".gif": "GIF",
    ".tiff": "TIFF",
    ".tif": "TIFF",
}

ALPHA_FORMATS = {"PNG", "WEBP", "TIFF", "GIF"}

_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}
_TIFF_MODES = {"1", "L", "LA", "I", "I;16", "F", "P", "RGB", "RGBA", "CMYK", "YCbCr"}


def format_for_path(path: Path) -> str:
    """根据扩展名推断 Pillow 格式名称。"""

    image_format = SUFFIX_FORMATS.get(path.suffix.lower())
    if image_format is None:
        raise UnsupportedFormatError(f"不支持的图片格式: {path.suffix or path.name}")
    return image_format


def flatten_alpha(img: Image.Image, background: tuple[int, ...] = (255, 255, 255)) -> Image.Image:
    """将任意模式图像转换为 RGB，透明区域混合到背景色上。"""

    if img.mode in {"RGBA", "LA"} or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        canvas = Image.new("RGB", img.size, background[:3])
        canvas.paste(rgba, mask=rgba.split()[-1])
        return canvas

    return img.convert("RGB")


def has_alpha(img: Image.Image) -> bool:
    return img.mode in {"RGBA", "LA", "PA"} or "transparency" in img.info


def normalize_mode(img: Image.Image, image_format: str) -> Image.Image:
    """将图像转换为目标格式可写入的模式。"""

    if image_format == "JPEG":
        if img.mode in {"RGB", "L", "CMYK"}:
            return img
        return flatten_alpha(img)

    if image_format == "WEBP":
        if img.mode in {"RGB", "RGBA"}:
            return img
        return img.convert("RGBA" if has_alpha(img) else "RGB")

    if image_format == "PNG":
        if img.mode in _PNG_MODES:
            return img
        return img.convert("RGBA" if has_alpha(img) else "RGB")

    if image_format == "TIFF":
        if img.mode in _TIFF_MODES:
            return img
        return img.convert("RGBA" if has_alpha(img) else "RGB")

    if image_format == "GIF":
        if img.mode in {"P", "L", "1", "RGB", "RGBA"}:
            return img
        return img.convert("RGBA" if has_alpha(img) else "RGB")

    raise UnsupportedFormatError(f"不支持的输出格式: {image_format}")


def save_image(
    image: Image.Image,
    destination: Path,
    image_format: Optional[str] = None,
    **params: Any,
) -> None:
    """按目标格式保存图片，写入失败时抛出 ImageWriteError。"""

    image_format = image_format or format_for_path(destination)
    image_to_save = normalize_mode(image, image_format)

    LOGGER.debug("写入 %s (%s, %s)", destination, image_format, params)
    try:
        image_to_save.save(destination, format=image_format, **params)
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"写入文件失败: {destination.name}: {exc}") from exc
