"""输入路径解析与图片文件扫描。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from imgwork.core.models import InputSpec

LOGGER = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".tiff", ".tif"}

PathLike = Union[str, os.PathLike]


def is_image_file(path: Path) -> bool:
    """按扩展名（不区分大小写）判断是否为图片。"""

    return path.suffix.lower() in IMAGE_EXTENSIONS


def resolve_inputs(paths: Sequence[PathLike], cwd: Optional[Path] = None) -> list[InputSpec]:
    """将用户给出的路径解析为绝对路径，相对路径基于 ``cwd``。

    只做词法上的规范化，不展开符号链接，输出位置因此始终相对用户给出的路径。
    """

    base = Path(cwd) if cwd is not None else Path.cwd()
    specs: list[InputSpec] = []
    for raw in paths:
        candidate = Path(raw).expanduser()
        if not candidate.is_absolute():
            candidate = base / candidate
        resolved = Path(os.path.normpath(candidate))
        specs.append(InputSpec(path=resolved, is_dir=resolved.is_dir(), exists=resolved.exists()))
    return specs


def _walk_directory(directory: Path) -> Iterator[Path]:
    """深度优先遍历目录，保持文件系统的列举顺序。

    目录中的符号链接目录不会被展开，遍历因此不会进入环。
    """

    try:
        with os.scandir(directory) as entries:
            children = list(entries)
    except OSError as exc:
        LOGGER.error("无法读取目录 %s: %s", directory, exc)
        return

    for entry in children:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_directory(Path(entry.path))
        elif entry.is_dir():
            LOGGER.debug("跳过符号链接目录: %s", entry.path)
        elif entry.is_file():
            path = Path(entry.path)
            if is_image_file(path):
                yield path


def discover_images(inputs: Sequence[InputSpec]) -> list[Path]:
    """扫描输入路径，按输入顺序返回所有图片文件的绝对路径。"""

    collected: list[Path] = []

    for spec in inputs:
        if not spec.exists:
            LOGGER.warning("路径不存在，已跳过: %s", spec.path)
            continue

        if spec.is_dir:
            found = list(_walk_directory(spec.path))
            LOGGER.debug("目录 %s 中发现 %d 张图片", spec.path, len(found))
            collected.extend(found)
        elif spec.path.is_file() and is_image_file(spec.path):
            collected.append(spec.path)
        else:
            LOGGER.warning("跳过非图片文件: %s", spec.path)

    return collected
