"""nsdebug 自身的内部日志（基于 loguru）。

用于记录库内部事件（选择器变化、实例销毁、格式化器异常等），
与 nsdebug 向用户输出的调试行互不干扰：
- 彩色控制台输出（stderr）
- 可选的标准库 logging 拦截
- 导入时不修改 loguru 的全局 sink，由宿主程序显式调用 configure_logger
"""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger as _logger

LOGGER_NAME = "nsdebug"

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# 库默认不向宿主程序的 sink 输出任何内部记录，configure_logger 时才开启
_logger.disable(LOGGER_NAME)

# 内部使用的 logger，所有记录都带有 name=nsdebug
logger = _logger.bind(name=LOGGER_NAME)

_sink_id: int | None = None


def configure_logger(
    *,
    console_level: str = "WARNING",
    backtrace: bool = True,
    diagnose: bool = False,
    intercept_stdlib: bool = False,
    exclusive: bool = True,
) -> Any:
    """为 nsdebug 的内部记录安装控制台 sink 并返回 logger。

    exclusive=True 时先移除 loguru 上已有的全部处理器（包括默认的 stderr 处理器），
    避免同一条内部记录被输出多次；exclusive=False 时保留宿主程序的处理器，
    此时这些处理器同样会收到 nsdebug 的内部记录。
    重复调用总是会替换上一次安装的 sink。
    """

    global _sink_id

    if exclusive:
        # 移除已存在的处理器以避免重复输出
        _logger.remove()
    elif _sink_id is not None:
        _logger.remove(_sink_id)
    _sink_id = None

    _logger.enable(LOGGER_NAME)

    # 只接收本库绑定了 name 的记录
    _sink_id = _logger.add(
        sys.stderr,
        colorize=True,
        format=_FORMAT,
        level=console_level,
        filter=lambda record: record["extra"].get("name") == LOGGER_NAME,
        backtrace=backtrace,
        diagnose=diagnose,
    )

    # 可选：拦截并重定向标准库 logging 到 loguru
    if intercept_stdlib:
        import logging

        class InterceptHandler(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - 简单透传
                try:
                    level = _logger.level(record.levelname).name
                except ValueError:
                    level = record.levelno
                frame, depth = logging.currentframe(), 2
                # 跳过 logging 内部帧以定位调用者
                while frame and frame.f_code.co_filename == logging.__file__:
                    frame = frame.f_back
                    depth += 1
                logger.opt(depth=depth, exception=record.exc_info).log(
                    level, record.getMessage()
                )

        logging.root.handlers = [InterceptHandler()]
        logging.root.setLevel(0)

    return logger


def get_logger(**extra: Any):
    """返回带有额外绑定字段的子 logger。"""
    if extra:
        return logger.bind(**extra)
    return logger
