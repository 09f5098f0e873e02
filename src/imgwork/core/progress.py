"""批处理进度事件，命令行据此驱动 rich 进度条。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ProgressUpdate:
    """每处理完一个文件发出一次。

    ``failed`` 为真时 ``message`` 携带该文件的错误信息，命令行会把它单独打印出来。
    """

    total: int
    completed: int
    message: Optional[str] = None
    failed: bool = False
