"""
日志模块

使用 loguru 提供统一的日志记录功能。
"""

import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stderr,
    enqueue: bool = True,
    colorize: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)，为空时读取 MODPLAN_DEBUG
        sink: 输出目标，默认 stderr，避免与 CLI 的结果输出混在一起
        enqueue: 是否启用队列（线程安全）
        colorize: 是否启用颜色
        log_file: 额外写入的日志文件，始终记录 DEBUG 级别，按大小轮转
    """
    if level is None:
        level = "DEBUG" if os.environ.get("MODPLAN_DEBUG", "0") == "1" else "INFO"

    logger.remove()

    logger.add(
        sink=sink,
        format=LOG_FORMAT,
        enqueue=enqueue,
        level=level,
        colorize=colorize,
        backtrace=(level == "DEBUG"),
        diagnose=(level == "DEBUG"),
    )

    if log_file:
        logger.add(
            log_file,
            format=LOG_FORMAT,
            enqueue=enqueue,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            encoding="utf-8",
        )

    if level == "DEBUG":
        logger.debug("DEBUG 模式已启用")


__all__ = ["logger", "setup_logger"]
