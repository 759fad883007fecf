"""
日志配置
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: str | int = "WARNING") -> None:
    """使用 rich 输出诊断日志（技术细节只写日志，不显示给用户）"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
