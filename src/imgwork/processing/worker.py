"""单个文件的处理单元。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from imgwork.core.config import TransformOptions
from imgwork.core.models import FileOutcome

LOGGER = logging.getLogger(__name__)

Operation = Callable[[Path, Path, TransformOptions], None]


@dataclass(slots=True)
class ProcessingTask:
    """描述单个图片处理任务。"""

    source_path: Path
    dest_path: Path
    operation: Operation
    options: TransformOptions


def run_task(task: ProcessingTask) -> FileOutcome:
    """执行单个任务，任何异常都转换为失败记录而不向上抛出。"""

    try:
        task.operation(task.source_path, task.dest_path, task.options)
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("处理失败 %s: %s", task.source_path.name, exc)
        LOGGER.debug("失败详情", exc_info=True)
        return FileOutcome(
            source_path=task.source_path,
            status="failed",
            message=str(exc) or exc.__class__.__name__,
        )

    return FileOutcome(
        source_path=task.source_path,
        status="processed",
        output_path=task.dest_path,
    )
