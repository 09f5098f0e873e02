"""项目内使用的自定义异常定义。"""


class ImgworkError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ImgworkError):
    """命令参数不合法时抛出，整个任务在处理任何文件前终止。"""


class ImageProcessingError(ImgworkError):
    """单个文件处理失败，只影响该文件。"""


class ImageLoadingError(ImageProcessingError):
    """图片加载失败。"""


class ImageWriteError(ImageProcessingError):
    """输出写入失败。"""


class UnsupportedFormatError(ImageProcessingError):
    """图片格式不受支持。"""


class CropBoundsError(ImageProcessingError):
    """裁剪尺寸超出源图片尺寸。"""
