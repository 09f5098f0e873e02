"""各子命令的参数模型与全局校验。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from imgwork.core.exceptions import InvalidConfigurationError
from imgwork.utils.colors import parse_hex_color

# 目标格式名称 -> Pillow 格式名称
CONVERT_FORMATS = {
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "tiff": "TIFF",
    "tif": "TIFF",
    "gif": "GIF",
}

# 接受有损 quality 参数的格式
LOSSY_FORMATS = {"JPEG", "WEBP"}

DIMENSION_KEYWORDS = {
    "half": 1 / 2,
    "third": 1 / 3,
    "quarter": 1 / 4,
}

CROP_POSITIONS = (
    "center",
    "top",
    "bottom",
    "left",
    "right",
    "top-left",
    "top-right",
    "bottom-left",
    "bottom-right",
)

Dimension = Union[int, str]


def normalize_format(name: str) -> str:
    """将用户输入的格式名称转换为 Pillow 格式名称。"""

    pil_format = CONVERT_FORMATS.get(name.strip().lower())
    if pil_format is None:
        supported = ", ".join(CONVERT_FORMATS)
        raise InvalidConfigurationError(f"不支持的格式: {name}，可选: {supported}")
    return pil_format


def extension_for_format(name: str) -> str:
    """返回目标格式对应的文件扩展名，JPEG 统一为 .jpg。"""

    pil_format = normalize_format(name)
    if pil_format == "JPEG":
        return ".jpg"
    return "." + pil_format.lower()


def parse_dimension(value: Optional[str], label: str) -> Optional[Dimension]:
    """解析尺寸参数：正整数或 half/third/quarter 关键字。"""

    if value is None:
        return None
    text = str(value).strip().lower()
    if text in DIMENSION_KEYWORDS:
        return text
    try:
        number = int(text)
    except ValueError as exc:
        keywords = "/".join(DIMENSION_KEYWORDS)
        raise InvalidConfigurationError(f"{label} 必须为正整数或 {keywords}: {value}") from exc
    if number <= 0:
        raise InvalidConfigurationError(f"{label} 必须大于 0: {value}")
    return number


def resolve_dimension(value: Dimension, source: int) -> int:
    """根据源图片尺寸解析关键字尺寸。"""

    if isinstance(value, str):
        return max(1, round(source * DIMENSION_KEYWORDS[value]))
    return value


def _validate_quality(quality: int) -> None:
    if not 1 <= quality <= 100:
        raise InvalidConfigurationError(f"quality 必须在 1 到 100 之间: {quality}")


def _validate_dimension(value: Optional[Dimension], label: str) -> None:
    if value is None:
        return
    if isinstance(value, str):
        if value not in DIMENSION_KEYWORDS:
            raise InvalidConfigurationError(f"未知的尺寸关键字 {label}: {value}")
    elif value <= 0:
        raise InvalidConfigurationError(f"{label} 必须大于 0: {value}")


@dataclass(slots=True)
class ConvertOptions:
    """格式转换参数。"""

    format: str
    quality: int = 80

    def validate(self) -> None:
        normalize_format(self.format)
        _validate_quality(self.quality)

    @property
    def pil_format(self) -> str:
        return normalize_format(self.format)

    @property
    def extension(self) -> str:
        return extension_for_format(self.format)


@dataclass(slots=True)
class ResizeOptions:
    """等比缩放参数，宽高至少给出一个。"""

    width: Optional[Dimension] = None
    height: Optional[Dimension] = None
    background: Optional[str] = None

    def validate(self) -> None:
        if self.width is None and self.height is None:
            raise InvalidConfigurationError("--w 与 --h 至少需要指定一个")
        _validate_dimension(self.width, "宽度")
        _validate_dimension(self.height, "高度")
        if self.background is not None:
            parse_hex_color(self.background)


@dataclass(slots=True)
class CropOptions:
    """按锚点裁剪的参数。"""

    width: int
    height: int
    position: str = "center"

    def validate(self) -> None:
        if self.width <= 0:
            raise InvalidConfigurationError(f"宽度必须大于 0: {self.width}")
        if self.height <= 0:
            raise InvalidConfigurationError(f"高度必须大于 0: {self.height}")
        if self.position.lower() not in CROP_POSITIONS:
            raise InvalidConfigurationError(
                f"未知的裁剪位置: {self.position}，可选: {', '.join(CROP_POSITIONS)}"
            )


@dataclass(slots=True)
class OptimizeOptions:
    """压缩优化参数，quality 与 lossless 二选一。"""

    quality: Optional[int] = None
    lossless: bool = False

    def validate(self) -> None:
        if self.quality is not None and self.lossless:
            raise InvalidConfigurationError("--quality 与 --lossless 不能同时使用")
        if self.quality is None and not self.lossless:
            raise InvalidConfigurationError("必须指定 --quality 或 --lossless 其中之一")
        if self.quality is not None:
            _validate_quality(self.quality)


TransformOptions = Union[ConvertOptions, ResizeOptions, CropOptions, OptimizeOptions]
