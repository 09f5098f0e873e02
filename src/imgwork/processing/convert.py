"""格式转换。"""

from __future__ import annotations

import logging
from pathlib import Path

from imgwork.core.config import LOSSY_FORMATS, ConvertOptions
from imgwork.processing.encoder import save_image
from imgwork.processing.image_loader import load_image

LOGGER = logging.getLogger(__name__)


def convert_image(input_path: Path, output_path: Path, options: ConvertOptions) -> None:
    """将图片转换为目标格式，quality 只作用于有损格式。"""

    options.validate()
    image_format = options.pil_format

    params = {}
    if image_format in LOSSY_FORMATS:
        params["quality"] = options.quality

    image = load_image(input_path)
    try:
        save_image(image, output_path, image_format, **params)
    finally:
        image.close()
    LOGGER.debug("已转换 %s -> %s", input_path.name, output_path.name)
