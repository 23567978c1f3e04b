from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:  # pragma: no cover - 仅用于类型检查的导入
    from .context import DebugContext

Sink = Callable[[str], Any]


class Debugger:
    """绑定到某个命名空间的可调用 debugger。

    实例只保存自身状态（命名空间、颜色、enabled 标记、自定义输出函数、上次输出时间），
    真正的输出逻辑由所属的 `DebugContext.emit` 完成。

    Examples:
        >>> ctx = DebugContext("server:*", sink=print)
        >>> http = ctx.create_debug("server").extend("http")
        >>> http.namespace
        'server:http'
        >>> http("listening on %d", 8080)  # doctest: +SKIP
    """

    def __init__(self, namespace: str, context: DebugContext) -> None:
        self._namespace = namespace
        self._context = context
        self.color: int = context.select_color(namespace)
        self.enabled: bool = context.is_enabled(namespace)
        # 自定义输出函数；为 None 时使用 context 的默认 sink
        self.log: Optional[Sink] = None
        self.prev_time: Optional[float] = None

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def context(self) -> DebugContext:
        return self._context

    def __call__(self, *args: Any) -> None:
        # 禁用时只做一次布尔判断：不格式化，也不读时钟
        if not self.enabled:
            return
        self._context.emit(self, args)

    def extend(self, sub_namespace: str, delimiter: str = ":") -> Debugger:
        """派生子命名空间的 debugger，继承自定义输出函数（不继承 enabled）。"""
        child = self._context.create_debug(f"{self._namespace}{delimiter}{sub_namespace}")
        child.log = self.log
        return child

    def destroy(self) -> bool:
        """从登记表移除；返回是否确实移除了。"""
        return self._context.remove(self)

    def __repr__(self) -> str:
        state = "enabled" if self.enabled else "disabled"
        return f"<Debugger {self._namespace!r} {state}>"


__all__ = ["Debugger", "Sink"]
