"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

SINGLE_FILE = "single-file"
DIRECTORY_TREE = "directory-tree"


@dataclass(frozen=True, slots=True)
class InputSpec:
    """用户给出的输入路径（文件或目录），已解析为绝对路径。"""

    path: Path
    is_dir: bool
    exists: bool = True


@dataclass(frozen=True, slots=True)
class OutputTarget:
    """一次任务的输出形态：单个文件或目录树。"""

    kind: str
    path: Path

    @property
    def is_single_file(self) -> bool:
        return self.kind == SINGLE_FILE


@dataclass(slots=True)
class FileOutcome:
    """记录单个文件的处理结果（用于汇总与报告）。"""

    source_path: Path
    status: str
    output_path: Optional[Path] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "processed"


@dataclass(slots=True)
class BatchResult:
    """批处理的最终产出，按发现顺序记录每个文件。"""

    total: int
    outcomes: list[FileOutcome] = field(default_factory=list)

    def record(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def successful(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)

    @property
    def errors(self) -> list[tuple[str, str]]:
        """返回 (文件名, 错误信息) 列表。"""

        return [
            (outcome.source_path.name, outcome.message or "")
            for outcome in self.outcomes
            if not outcome.ok
        ]
