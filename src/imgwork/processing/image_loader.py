"""图片读取：元数据探测与完整加载。"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from imgwork.core.exceptions import ImageLoadingError

LOGGER = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112
# EXIF 方向值 5-8 表示图片需要旋转 90 度显示
_SWAPPED_ORIENTATIONS = {5, 6, 7, 8}


@dataclass(slots=True)
class ImageInfo:
    """不解码像素即可获得的图片信息。"""

    width: int
    height: int
    format: Optional[str]
    orientation: int = 1

    @property
    def size(self) -> tuple[int, int]:
        """按 EXIF 方向校正后的显示尺寸。"""

        if self.orientation in _SWAPPED_ORIENTATIONS:
            return self.height, self.width
        return self.width, self.height


def probe_image(path: Path) -> ImageInfo:
    """读取图片头信息（宽高、格式、方向），不解码像素数据。"""

    try:
        with Image.open(path) as img:
            orientation = img.getexif().get(ORIENTATION_TAG, 1)
            return ImageInfo(
                width=img.width,
                height=img.height,
                format=img.format,
                orientation=orientation,
            )
    except (UnidentifiedImageError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
        raise ImageLoadingError(f"无法读取图像信息: {path.name}") from exc


@contextmanager
def open_image(path: Path) -> Iterator[Image.Image]:
    """打开并解码图片，保留原始像素与元数据，退出时关闭文件。"""

    try:
        img = Image.open(path)
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
        raise ImageLoadingError(f"无法加载图像: {path.name}") from exc

    try:
        yield img
    finally:
        img.close()


def load_image(path: Path) -> Image.Image:
    """加载单张图片并执行 EXIF 旋转。

    返回值为新的 Image 对象，调用者负责关闭。
    """

    with open_image(path) as img:
        oriented = ImageOps.exif_transpose(img)
        return oriented.copy()
