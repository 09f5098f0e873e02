"""压缩优化：按 quality 有损重编码，或无损重编码。

输出格式与输入相同。两种模式都会清理元数据，只保留 EXIF 方向信息，
像素不做旋转。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from PIL import Image

from imgwork.core.config import OptimizeOptions
from imgwork.processing.encoder import format_for_path, save_image
from imgwork.processing.image_loader import ORIENTATION_TAG, open_image

LOGGER = logging.getLogger(__name__)

# 重编码时仍然需要的 info 字段
_ENCODING_INFO_KEYS = {"transparency", "duration", "loop", "background", "disposal"}

_EXIF_FORMATS = {"JPEG", "PNG", "WEBP"}

# TIFF 的 JPEG 压缩只支持这些模式，其余模式改用 deflate
_TIFF_JPEG_MODES = {"RGB", "L"}


def png_compress_level(quality: int) -> int:
    """将 1-100 的 quality 映射为 PNG 压缩级别 0-9。"""

    return max(0, min(9, round((100 - quality) / 10)))


def quality_params(image_format: str, quality: int) -> dict[str, Any]:
    if image_format == "JPEG":
        return {"quality": quality, "optimize": True, "progressive": True}
    if image_format == "WEBP":
        return {"quality": quality, "method": 6}
    if image_format == "PNG":
        return {"compress_level": png_compress_level(quality)}
    if image_format == "TIFF":
        return {"compression": "jpeg", "quality": quality}
    if image_format == "GIF":
        return {"optimize": True}
    return {}


def lossless_params(image_format: str) -> dict[str, Any]:
    if image_format == "JPEG":
        # 复用源文件的量化表与采样，避免二次有损
        return {"quality": "keep", "subsampling": "keep", "optimize": True}
    if image_format == "WEBP":
        return {"lossless": True, "quality": 100, "method": 6}
    if image_format == "PNG":
        return {"optimize": True}
    if image_format == "TIFF":
        return {"compression": "tiff_adobe_deflate"}
    if image_format == "GIF":
        return {"optimize": True}
    return {}


def _strip_metadata(image: Image.Image) -> Optional[int]:
    """清除元数据并返回原有的 EXIF 方向值。"""

    orientation = image.getexif().get(ORIENTATION_TAG)
    for key in list(image.info):
        if key not in _ENCODING_INFO_KEYS:
            del image.info[key]
    return orientation


def _orientation_params(image_format: str, orientation: Optional[int]) -> dict[str, Any]:
    if orientation is None:
        return {}
    if image_format in _EXIF_FORMATS:
        exif = Image.Exif()
        exif[ORIENTATION_TAG] = orientation
        return {"exif": exif.tobytes()}
    if image_format == "TIFF":
        return {"tiffinfo": {ORIENTATION_TAG: orientation}}
    return {}


def optimize_image(input_path: Path, output_path: Path, options: OptimizeOptions) -> None:
    """按 quality 或无损方式重新编码图片以减小体积。"""

    options.validate()
    image_format = format_for_path(input_path)

    if options.lossless:
        params = lossless_params(image_format)
    else:
        params = quality_params(image_format, options.quality)

    with open_image(input_path) as image:
        orientation = _strip_metadata(image)
        working = image
        if image_format == "TIFF":
            # TIFF 写入时会沿用源文件的 tag_v2，复制后只保留像素
            working = image.copy()
            if params.get("compression") == "jpeg" and working.mode not in _TIFF_JPEG_MODES:
                params = {"compression": "tiff_adobe_deflate"}
        params.update(_orientation_params(image_format, orientation))
        if image_format in {"GIF", "WEBP"} and getattr(image, "n_frames", 1) > 1:
            params["save_all"] = True
        try:
            save_image(working, output_path, image_format, **params)
        finally:
            if working is not image:
                working.close()

    LOGGER.debug(
        "已优化 %s (%s, %s)",
        input_path.name,
        image_format,
        "lossless" if options.lossless else f"quality={options.quality}",
    )
