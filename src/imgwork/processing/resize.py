"""等比缩放：单边按比例计算，双边按 contain 模式适配并填充。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps

from imgwork.core.config import Dimension, ResizeOptions, resolve_dimension
from imgwork.processing.encoder import ALPHA_FORMATS, format_for_path, has_alpha, save_image
from imgwork.processing.image_loader import load_image
from imgwork.utils.colors import parse_hex_color

LOGGER = logging.getLogger(__name__)

TRANSPARENT = (255, 255, 255, 0)
WHITE = (255, 255, 255)


def compute_resize_size(
    source_size: tuple[int, int],
    width: Optional[Dimension],
    height: Optional[Dimension],
) -> tuple[int, int]:
    """计算输出尺寸。

    同时给出宽高时返回目标框本身；只给一边时另一边按源图比例计算。
    关键字尺寸（half/third/quarter）基于源图对应边解析。
    """

    src_w, src_h = source_size
    target_w = resolve_dimension(width, src_w) if width is not None else None
    target_h = resolve_dimension(height, src_h) if height is not None else None

    if target_w is not None and target_h is not None:
        return target_w, target_h
    if target_w is not None:
        return target_w, max(1, round(src_h * target_w / src_w))
    if target_h is not None:
        return max(1, round(src_w * target_h / src_h)), target_h
    raise ValueError("width 与 height 不能同时为空")


def _background_for(options: ResizeOptions, image_format: str) -> tuple[int, ...]:
    if options.background:
        color = parse_hex_color(options.background)
        return color if image_format in ALPHA_FORMATS else color[:3]
    if image_format in ALPHA_FORMATS:
        return TRANSPARENT
    return WHITE


def _apply_contain(image: Image.Image, box: tuple[int, int], background: tuple[int, ...]) -> Image.Image:
    """缩放到目标框内并居中填充到目标框尺寸。"""

    fitted = ImageOps.contain(image, box, Image.LANCZOS)
    mode = "RGBA" if len(background) == 4 else "RGB"
    canvas = Image.new(mode, box, background)
    offset = (
        (box[0] - fitted.width) // 2,
        (box[1] - fitted.height) // 2,
    )

    if mode == "RGBA":
        canvas.paste(fitted.convert("RGBA"), offset)
    elif has_alpha(fitted):
        rgba = fitted.convert("RGBA")
        canvas.paste(rgba, offset, mask=rgba)
    else:
        canvas.paste(fitted.convert("RGB"), offset)
    return canvas


def resize_image(input_path: Path, output_path: Path, options: ResizeOptions) -> None:
    """按宽和/或高缩放图片。"""

    options.validate()
    image_format = format_for_path(output_path)

    image = load_image(input_path)
    resized: Optional[Image.Image] = None
    try:
        size = compute_resize_size(image.size, options.width, options.height)
        if options.width is not None and options.height is not None:
            resized = _apply_contain(image, size, _background_for(options, image_format))
        else:
            resized = image.resize(size, Image.LANCZOS)
        LOGGER.debug("缩放 %s: %s -> %s", input_path.name, image.size, resized.size)
        save_image(resized, output_path, image_format)
    finally:
        image.close()
        if resized is not None:
            resized.close()
