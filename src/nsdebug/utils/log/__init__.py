"""nsdebug 的内部日志工具模块。

提供基于 loguru 的内部 logger：
- 彩色控制台输出
- 仅处理 nsdebug 自身的记录
- 可选的标准库 logging 拦截
"""

from .logger import LOGGER_NAME, configure_logger, get_logger, logger

__all__ = ["logger", "configure_logger", "get_logger", "LOGGER_NAME"]
