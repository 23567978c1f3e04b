"""运行时配置（基于 pydantic-settings）。

所有配置都可以通过环境变量注入：

- ``DEBUG``：命名空间选择器，例如 ``DEBUG=api:*,-api:internal``
- ``DEBUG_COLORS``：强制开启/关闭彩色输出，未设置时根据 stderr 是否为终端自动判断
- ``DEBUG_EXTENDED_COLORS``：使用 256 色调色板
- ``DEBUG_SYNC_ENV``：enable/disable 时把选择器写回 ``os.environ["DEBUG"]``
- ``DEBUG_LOG_*``：nsdebug 自身内部日志（loguru）的配置
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """nsdebug 配置模型（环境变量优先）。

    环境变量前缀：DEBUG_
    例外：选择器字段直接读取 ``DEBUG`` 变量。
    """

    # 命名空间选择器
    namespaces: Optional[str] = Field(
        default=None,
        validation_alias="DEBUG",
        description="逗号/空白分隔的命名空间选择器",
    )

    # 输出相关
    colors: Optional[bool] = None
    extended_colors: bool = False
    sync_env: bool = False

    # 内部日志相关
    log_console_level: str = "WARNING"
    log_backtrace: bool = True
    log_diagnose: bool = False
    log_intercept_stdlib: bool = False

    model_config = SettingsConfigDict(env_prefix="DEBUG_", populate_by_name=True)

    @field_validator("namespaces")
    @classmethod
    def normalize_namespaces(cls, v: Optional[str]) -> Optional[str]:
        """空白选择器视为未设置。"""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("log_console_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.strip().upper()


# module-level cached settings
_SETTINGS: Optional[Settings] = None


def get_settings(force_reload: bool = False) -> Settings:
    """返回全局 Settings 单例（按需从环境加载）。

    如果 force_reload=True，会从环境重新创建实例。
    """

    global _SETTINGS
    if _SETTINGS is None or force_reload:
        _SETTINGS = Settings()
    return _SETTINGS


__all__ = ["Settings", "get_settings"]
