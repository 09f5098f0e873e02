"""命令行使用的日志配置。"""

from __future__ import annotations

import logging


def setup_logging(level: int = logging.INFO) -> None:
    """配置根日志：扫描跳过、单文件失败等诊断信息写到 stderr。

    ``--verbose`` 时传入 DEBUG，可看到每个文件的输出路径与编码参数。
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Pillow 的插件加载日志在 DEBUG 下过于嘈杂
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
