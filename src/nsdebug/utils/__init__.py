"""
nsdebug.utils 包

通用工具集合（颜色选择、时间格式化、内部日志），供全局复用。
"""

# 便捷导出
from .log import logger as logger

__all__ = ["logger"]
