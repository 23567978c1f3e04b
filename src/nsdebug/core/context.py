"""DebugContext：规则集、指令表、实例登记表与输出配置的持有者。

所有会影响全部 debugger 的配置都挂在一个显式构造的 context 上；
修改选择器时会立即对登记表中的每个实例重新计算 enabled 标记。

模块级的 `create_debug` / `enable` / `disable` / `is_enabled` 等便捷函数
作用于按需创建的默认 context（首次使用时从环境变量 ``DEBUG`` 读取选择器）。
"""

from __future__ import annotations

import os
import sys
from typing import Any, Optional, Sequence

from nsdebug.config.settings import Settings, get_settings
from nsdebug.utils.colors import (
    BASIC_COLORS,
    EXTENDED_COLORS,
    RESET,
    color_code,
    select_color,
    supports_color,
)
from nsdebug.utils.humanize import humanize_ms
from nsdebug.utils.log import logger

from .formatting import DirectiveRegistry, format_args
from .instance import Debugger, Sink
from .registry import Clock, InstanceRegistry
from .selector import compile_selector
from .types import RuleSet

ENV_VAR = "DEBUG"


def write_stderr(line: str) -> None:
    """默认 sink：每次输出一行到当前的 sys.stderr。"""
    sys.stderr.write(line + "\n")


class DebugContext:
    """一组 debugger 共享的运行时状态。

    Args:
        selector: 初始选择器，None 或空字符串表示全部禁用
        sink: 默认输出函数，接收一行已渲染的文本
        use_colors: 是否输出 ANSI 颜色
        palette: 颜色编号调色板
        clock: 返回毫秒读数的时钟，默认使用单调时钟
        sync_env: enable/disable 时是否把选择器写回 ``os.environ["DEBUG"]``
    """

    def __init__(
        self,
        selector: Optional[str] = None,
        *,
        sink: Optional[Sink] = None,
        use_colors: bool = False,
        palette: Sequence[int] = BASIC_COLORS,
        clock: Optional[Clock] = None,
        sync_env: bool = False,
    ) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self.formatters = DirectiveRegistry()
        self.registry = InstanceRegistry(clock=clock)
        self.sink: Sink = sink or write_stderr
        self.use_colors = use_colors
        self.palette: tuple[int, ...] = tuple(palette)
        self.sync_env = sync_env
        self.namespaces: Optional[str] = None
        self.rules = RuleSet()
        self.enable(selector)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> DebugContext:
        """根据 Settings（默认读取环境变量）构造 context。

        kwargs 会覆盖从 settings 推导出的参数。
        """
        if settings is None:
            settings = get_settings()

        use_colors = settings.colors
        if use_colors is None:
            use_colors = supports_color(sys.stderr)

        options: dict[str, Any] = {
            "use_colors": use_colors,
            "palette": EXTENDED_COLORS if settings.extended_colors else BASIC_COLORS,
            "sync_env": settings.sync_env,
        }
        options.update(kwargs)
        return cls(settings.namespaces, **options)

    # ------------------------------------------------------------------
    # 选择器
    # ------------------------------------------------------------------

    def enable(self, selector: Optional[str]) -> None:
        """编译选择器并替换当前规则集，随后重新计算所有实例的 enabled 标记。"""
        text = selector if isinstance(selector, str) else ""
        if self.sync_env:
            self._write_env(text)

        rules = compile_selector(text)
        with self.registry.lock:
            self.namespaces = text or None
            self.rules = rules
            self.registry.recompute_all(rules)

        logger.debug(
            "selector {!r} compiled: {} allow, {} deny",
            text,
            len(rules.allow),
            len(rules.deny),
        )

    def disable(self) -> str:
        """清空规则集，返回能够重建此前规则集的选择器字符串。"""
        with self.registry.lock:
            previous = self.rules.to_selector()
            self.enable("")
        return previous

    def is_enabled(self, namespace: str) -> bool:
        return self.rules.is_enabled(namespace)

    def _write_env(self, selector: str) -> None:
        if selector:
            os.environ[ENV_VAR] = selector
        else:
            os.environ.pop(ENV_VAR, None)

    # ------------------------------------------------------------------
    # 实例
    # ------------------------------------------------------------------

    def create_debug(self, namespace: str) -> Debugger:
        """创建并登记一个 debugger。"""
        with self.registry.lock:
            instance = Debugger(namespace, self)
            self.registry.register(instance)
        return instance

    def remove(self, instance: Debugger) -> bool:
        removed = self.registry.unregister(instance)
        if removed:
            logger.trace("debugger {!r} destroyed", instance.namespace)
        return removed

    def select_color(self, namespace: str) -> int:
        return select_color(namespace, self.palette)

    # ------------------------------------------------------------------
    # 输出
    # ------------------------------------------------------------------

    def emit(self, instance: Debugger, args: Sequence[Any]) -> None:
        """为已启用的实例渲染并输出一行。"""
        diff = self.registry.tick(instance)
        message = format_args(args, self.formatters.snapshot())
        line = self.compose(instance.namespace, instance.color, message, diff)
        output = instance.log or self.sink
        output(line)

    def compose(self, namespace: str, color: int, message: str, diff: float) -> str:
        """拼接命名空间前缀、消息以及 ``+<间隔>`` 后缀。"""
        elapsed = humanize_ms(diff)
        if not self.use_colors:
            return f"  {namespace} {message} +{elapsed}"
        code = color_code(color)
        prefix = f"  {code};1m{namespace} {RESET}"
        return f"{prefix}{message} {code}m+{elapsed}{RESET}"

    def __repr__(self) -> str:
        return (
            f"<DebugContext namespaces={self.namespaces!r} "
            f"instances={len(self.registry)}>"
        )


# module-level default context
_CONTEXT: Optional[DebugContext] = None


def get_context(force_reload: bool = False) -> DebugContext:
    """返回默认 DebugContext 单例（首次使用时从环境创建）。

    如果 force_reload=True，会重新读取环境并创建新的 context；
    旧 context 中已创建的 debugger 不会迁移到新 context。
    """

    global _CONTEXT
    if _CONTEXT is None or force_reload:
        _CONTEXT = DebugContext.from_settings(get_settings(force_reload=force_reload))
    return _CONTEXT


def create_debug(namespace: str) -> Debugger:
    return get_context().create_debug(namespace)


def enable(selector: Optional[str]) -> None:
    get_context().enable(selector)


def disable() -> str:
    return get_context().disable()


def is_enabled(namespace: str) -> bool:
    return get_context().is_enabled(namespace)


def get_formatters() -> DirectiveRegistry:
    """默认 context 的指令表，宿主程序可以在上面注册自定义指令。"""
    return get_context().formatters


__all__ = [
    "DebugContext",
    "write_stderr",
    "get_context",
    "create_debug",
    "enable",
    "disable",
    "is_enabled",
    "get_formatters",
    "ENV_VAR",
]
