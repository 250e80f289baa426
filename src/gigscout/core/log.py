"""
日志：统一输出到 stdout，级别由 LOG_LEVEL 控制（默认 INFO）。

各模块使用 log = get_logger(__name__)；首次调用时配置 root handler。
"""
from __future__ import annotations

import logging
import os
import sys

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """返回具名 logger；首次调用时配置 root handler。"""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # uvicorn / pytest 已装好 handler 时不重复添加
    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)
