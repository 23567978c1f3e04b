"""nsdebug.config 包：环境配置与内部日志配置适配。"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
