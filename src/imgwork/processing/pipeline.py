"""批处理流水线：按发现顺序逐个处理文件，单个失败不中断整批。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from imgwork.core.config import TransformOptions
from imgwork.core.models import BatchResult, FileOutcome, InputSpec, OutputTarget
from imgwork.core.output_manager import OutputManager
from imgwork.core.progress import ProgressUpdate
from imgwork.processing.worker import Operation, ProcessingTask, run_task

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def process_batch(
    files: Sequence[Path],
    inputs: Sequence[InputSpec],
    target: OutputTarget,
    operation: Operation,
    options: TransformOptions,
    *,
    new_extension: Optional[str] = None,
    progress_callback: ProgressCallback = None,
) -> BatchResult:
    """对每个图片依次执行 ``operation``，收集结果后返回。"""

    total = len(files)
    result = BatchResult(total=total)
    LOGGER.info("共 %d 张图片待处理，输出到 %s", total, target.path)

    if total == 0:
        _emit_progress(progress_callback, completed=0, total=0, message="没有需要处理的图片")
        return result

    output_manager = OutputManager(inputs, target, new_extension)

    for index, source in enumerate(files, start=1):
        LOGGER.debug("处理 %d/%d: %s", index, total, source)
        try:
            destination = output_manager.prepare_destination(source)
        except OSError as exc:
            LOGGER.error("无法创建输出目录 %s: %s", source.name, exc)
            outcome = FileOutcome(source_path=source, status="failed", message=f"无法创建输出目录: {exc}")
        else:
            outcome = run_task(
                ProcessingTask(
                    source_path=source,
                    dest_path=destination,
                    operation=operation,
                    options=options,
                )
            )

        result.record(outcome)
        _emit_progress(
            progress_callback,
            completed=index,
            total=total,
            message=_describe(outcome),
            failed=not outcome.ok,
        )

    LOGGER.info("处理完成：成功 %d，失败 %d", result.successful, result.failed)
    return result


def _describe(outcome: FileOutcome) -> str:
    if outcome.ok:
        return f"完成 {outcome.source_path.name}"
    return f"失败 {outcome.source_path.name}: {outcome.message}"


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
    failed: bool = False,
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message, failed=failed))
