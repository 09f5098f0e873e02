"""输出位置决策：输出形态解析与逐文件路径映射。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from imgwork.core.exceptions import InvalidConfigurationError
from imgwork.core.models import DIRECTORY_TREE, SINGLE_FILE, InputSpec, OutputTarget

LOGGER = logging.getLogger(__name__)

OUTPUT_SUFFIX = "-imgwork"
MULTI_INPUT_DIRNAME = "imgwork-output"

_RELATIVE_PREFIXES = ("./", "../", ".\\", "..\\")


def _is_dot_relative(value: str) -> bool:
    return value in {".", ".."} or value.startswith(_RELATIVE_PREFIXES)


def resolve_output_target(
    inputs: Sequence[InputSpec],
    explicit_out: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> OutputTarget:
    """根据输入与 ``--out`` 决定本次任务的输出形态与根路径。

    - 指定 ``--out``：以 ``./``、``../`` 开头时相对第一个输入的父目录解析，
      否则相对 ``cwd`` 解析；结果总是目录树。
    - 单个目录 ``D``：输出到同级的 ``D-imgwork/``。
    - 单个文件 ``B.ext``：输出到同目录的 ``B-imgwork.ext``。
    - 多个输入：输出到 ``cwd/imgwork-output/``。
    """

    base = Path(cwd) if cwd is not None else Path.cwd()

    if explicit_out:
        if _is_dot_relative(explicit_out):
            if not inputs:
                raise InvalidConfigurationError("缺少输入路径，无法解析相对输出目录")
            anchor = inputs[0].path.parent
            root = Path(os.path.normpath(anchor / explicit_out))
        else:
            candidate = Path(explicit_out).expanduser()
            if not candidate.is_absolute():
                candidate = base / candidate
            root = Path(os.path.normpath(candidate))
        return OutputTarget(kind=DIRECTORY_TREE, path=root)

    if not inputs:
        raise InvalidConfigurationError("至少需要一个输入路径")

    if len(inputs) == 1:
        only = inputs[0].path
        if not only.name:
            raise InvalidConfigurationError(f"无法为该输入生成默认输出位置，请使用 --out 指定: {only}")
        if inputs[0].is_dir:
            return OutputTarget(kind=DIRECTORY_TREE, path=only.with_name(only.name + OUTPUT_SUFFIX))
        return OutputTarget(
            kind=SINGLE_FILE,
            path=only.with_name(f"{only.stem}{OUTPUT_SUFFIX}{only.suffix}"),
        )

    return OutputTarget(kind=DIRECTORY_TREE, path=base / MULTI_INPUT_DIRNAME)


def find_owner(file: Path, inputs: Sequence[InputSpec]) -> Optional[InputSpec]:
    """按顺序返回第一个包含 ``file`` 的输入（路径前缀按目录层级比较）。"""

    for spec in inputs:
        if file == spec.path or file.is_relative_to(spec.path):
            return spec
    return None


def map_output_path(
    file: Path,
    inputs: Sequence[InputSpec],
    target: OutputTarget,
    new_extension: Optional[str] = None,
) -> Path:
    """计算单个图片的输出路径，不访问文件系统。"""

    if target.is_single_file:
        if new_extension:
            return target.path.with_suffix(new_extension)
        return target.path

    owner = find_owner(file, inputs)
    if owner is None:
        LOGGER.debug("未找到 %s 所属的输入路径，使用其所在目录", file)
        base_dir = file.parent
    elif owner.is_dir:
        base_dir = owner.path
    else:
        base_dir = owner.path.parent

    relative_dir = file.parent.relative_to(base_dir)
    name = file.stem + (new_extension or file.suffix)
    return target.path / relative_dir / name


class OutputManager:
    """负责一次任务内的输出路径计算与输出目录创建。"""

    def __init__(
        self,
        inputs: Sequence[InputSpec],
        target: OutputTarget,
        new_extension: Optional[str] = None,
    ) -> None:
        self.inputs = list(inputs)
        self.target = target
        self.new_extension = new_extension

    def destination_for(self, file: Path) -> Path:
        return map_output_path(file, self.inputs, self.target, self.new_extension)

    def prepare_destination(self, file: Path) -> Path:
        """返回输出路径，并确保其父目录存在。"""

        destination = self.destination_for(file)
        destination.parent.mkdir(parents=True, exist_ok=True)
        return destination
