"""按锚点位置裁剪。"""

from __future__ import annotations

import logging
from pathlib import Path

from imgwork.core.config import CropOptions
from imgwork.core.exceptions import CropBoundsError
from imgwork.processing.encoder import save_image
from imgwork.processing.image_loader import load_image, probe_image

LOGGER = logging.getLogger(__name__)


def compute_crop_box(
    source_size: tuple[int, int],
    crop_size: tuple[int, int],
    position: str = "center",
) -> tuple[int, int, int, int]:
    """返回 (left, top, right, bottom) 裁剪框；裁剪尺寸超出源图时抛出 CropBoundsError。"""

    src_w, src_h = source_size
    width, height = crop_size
    if width > src_w or height > src_h:
        raise CropBoundsError(f"裁剪尺寸 {width}x{height} 超出源图片尺寸 {src_w}x{src_h}")

    pos = position.lower()

    if pos.endswith("left"):
        left = 0
    elif pos.endswith("right"):
        left = src_w - width
    else:
        left = (src_w - width) // 2

    if pos.startswith("top"):
        top = 0
    elif pos.startswith("bottom"):
        top = src_h - height
    else:
        top = (src_h - height) // 2

    return left, top, left + width, top + height


def crop_image(input_path: Path, output_path: Path, options: CropOptions) -> None:
    """从源图片中按锚点截取指定尺寸的区域。"""

    options.validate()

    # 解码像素前先用头信息检查尺寸
    info = probe_image(input_path)
    box = compute_crop_box(info.size, (options.width, options.height), options.position)

    image = load_image(input_path)
    try:
        with image.crop(box) as cropped:
            LOGGER.debug("裁剪 %s: %s @ %s", input_path.name, cropped.size, box[:2])
            save_image(cropped, output_path)
    finally:
        image.close()
