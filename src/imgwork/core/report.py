"""CSV 处理报告。"""

from __future__ import annotations

import csv
from pathlib import Path

from imgwork.core.models import BatchResult

HEADER = ["source_path", "output_path", "status", "message"]


def write_csv_report(result: BatchResult, report_path: Path) -> Path:
    """将每个文件的处理结果按发现顺序写入 CSV。"""

    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in result.outcomes:
            writer.writerow(
                [
                    str(record.source_path),
                    str(record.output_path) if record.output_path else "",
                    record.status,
                    record.message or "",
                ]
            )
    return report_path
