"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, NoReturn, Optional

import typer
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from imgwork.core.config import (
    CONVERT_FORMATS,
    CROP_POSITIONS,
    ConvertOptions,
    CropOptions,
    OptimizeOptions,
    ResizeOptions,
    TransformOptions,
    parse_dimension,
)
from imgwork.core.exceptions import InvalidConfigurationError
from imgwork.core.models import BatchResult
from imgwork.core.output_manager import resolve_output_target
from imgwork.core.progress import ProgressUpdate
from imgwork.core.report import write_csv_report
from imgwork.core.scanner import discover_images, resolve_inputs
from imgwork.processing.convert import convert_image
from imgwork.processing.crop import crop_image
from imgwork.processing.optimize import optimize_image
from imgwork.processing.pipeline import process_batch
from imgwork.processing.resize import resize_image
from imgwork.processing.worker import Operation
from imgwork.utils.logging import setup_logging

__version__ = "1.0.0"

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="批量图片转换、缩放、裁剪与压缩工具。", no_args_is_help=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"imgwork {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="显示版本号"
    ),
) -> None:
    """批量图片转换、缩放、裁剪与压缩工具。"""

    setup_logging(logging.DEBUG if verbose else logging.INFO)


def _fail(message: str) -> NoReturn:
    typer.echo(f"错误: {message}", err=True)
    raise typer.Exit(code=1)


def _build_progress_callback(progress: Progress) -> Callable[[ProgressUpdate], None]:
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("处理图片", total=update.total)
        progress.update(task_id, completed=update.completed)
        if update.failed and update.message:
            progress.log(f"[red]{update.message}")

    return callback


def _print_summary(result: BatchResult) -> None:
    typer.echo("=" * 50)
    typer.echo(f"处理完成：成功 {result.successful}/{result.total}")
    if result.failed:
        typer.echo(f"失败 {result.failed}/{result.total}")
        for name, message in result.errors:
            typer.echo(f"  - {name}: {message}")
    typer.echo("=" * 50)


def _run_batch(
    files: List[Path],
    out: Optional[str],
    report: Optional[Path],
    operation: Operation,
    build_options: Callable[[], TransformOptions],
) -> None:
    """校验参数、扫描文件、解析输出位置并执行批处理。"""

    try:
        options = build_options()
        options.validate()
    except InvalidConfigurationError as exc:
        _fail(str(exc))

    cwd = Path.cwd()
    inputs = resolve_inputs(files, cwd)
    images = discover_images(inputs)
    if not images:
        _fail("没有找到需要处理的图片")

    try:
        target = resolve_output_target(inputs, out, cwd)
    except InvalidConfigurationError as exc:
        _fail(str(exc))

    new_extension = options.extension if isinstance(options, ConvertOptions) else None
    typer.echo(f"发现 {len(images)} 张图片，输出到 {target.path}")

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
    )
    with progress:
        result = process_batch(
            images,
            inputs,
            target,
            operation,
            options,
            new_extension=new_extension,
            progress_callback=_build_progress_callback(progress),
        )

    _print_summary(result)

    if report is not None:
        try:
            report_path = write_csv_report(result, report.expanduser().resolve())
        except OSError as exc:
            LOGGER.error("写入报告失败：%s", exc)
        else:
            typer.echo(f"报告文件：{report_path}")

    raise typer.Exit(code=1 if result.failed else 0)


@app.command("convert")
def convert_cli(
    files: List[Path] = typer.Argument(..., help="图片文件或目录，可指定多个"),
    to: str = typer.Option(..., "--to", help=f"目标格式 ({', '.join(CONVERT_FORMATS)})"),
    quality: int = typer.Option(80, "--quality", help="有损格式的质量 (1-100)"),
    out: Optional[str] = typer.Option(None, "--out", help="输出目录；./ 或 ../ 开头时相对第一个输入的父目录"),
    report: Optional[Path] = typer.Option(None, "--report", help="将处理结果写入 CSV 报告"),
) -> None:
    """将图片转换为其他格式。"""

    _run_batch(files, out, report, convert_image, lambda: ConvertOptions(format=to, quality=quality))


@app.command("resize")
def resize_cli(
    files: List[Path] = typer.Argument(..., help="图片文件或目录，可指定多个"),
    width: Optional[str] = typer.Option(None, "--w", help="目标宽度（像素或 half/third/quarter）"),
    height: Optional[str] = typer.Option(None, "--h", help="目标高度（像素或 half/third/quarter）"),
    background: Optional[str] = typer.Option(
        None, "--background", help="同时指定宽高时的填充色 (HEX)，默认透明/白色"
    ),
    out: Optional[str] = typer.Option(None, "--out", help="输出目录；./ 或 ../ 开头时相对第一个输入的父目录"),
    report: Optional[Path] = typer.Option(None, "--report", help="将处理结果写入 CSV 报告"),
) -> None:
    """等比缩放图片。"""

    _run_batch(
        files,
        out,
        report,
        resize_image,
        lambda: ResizeOptions(
            width=parse_dimension(width, "宽度"),
            height=parse_dimension(height, "高度"),
            background=background,
        ),
    )


@app.command("crop")
def crop_cli(
    files: List[Path] = typer.Argument(..., help="图片文件或目录，可指定多个"),
    width: int = typer.Option(..., "--w", help="裁剪宽度（像素）"),
    height: int = typer.Option(..., "--h", help="裁剪高度（像素）"),
    position: str = typer.Option("center", "--pos", help=f"裁剪锚点 ({', '.join(CROP_POSITIONS)})"),
    out: Optional[str] = typer.Option(None, "--out", help="输出目录；./ 或 ../ 开头时相对第一个输入的父目录"),
    report: Optional[Path] = typer.Option(None, "--report", help="将处理结果写入 CSV 报告"),
) -> None:
    """按锚点裁剪出指定尺寸。"""

    _run_batch(
        files,
        out,
        report,
        crop_image,
        lambda: CropOptions(width=width, height=height, position=position),
    )


@app.command("optimize")
def optimize_cli(
    files: List[Path] = typer.Argument(..., help="图片文件或目录，可指定多个"),
    quality: Optional[int] = typer.Option(None, "--quality", help="目标质量 (1-100)"),
    lossless: bool = typer.Option(False, "--lossless", help="使用无损优化"),
    out: Optional[str] = typer.Option(None, "--out", help="输出目录；./ 或 ../ 开头时相对第一个输入的父目录"),
    report: Optional[Path] = typer.Option(None, "--report", help="将处理结果写入 CSV 报告"),
) -> None:
    """压缩图片以减小文件体积。"""

    _run_batch(
        files,
        out,
        report,
        optimize_image,
        lambda: OptimizeOptions(quality=quality, lossless=lossless),
    )


if __name__ == "__main__":
    app()
