from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Callable, Iterator, Optional

from .types import RuleSet

if TYPE_CHECKING:  # pragma: no cover - 仅用于类型检查的导入
    from .instance import Debugger

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """默认时钟：单调时钟的毫秒读数，仅用于显示间隔。"""
    return time.monotonic() * 1000.0


class InstanceRegistry:
    """存活 debugger 实例的登记表，同时负责计算两次输出之间的间隔。

    登记表只做跟踪，不决定实例的生命周期：实例通过 `destroy()` 显式移出。
    成员判断基于对象身份而不是相等性。
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._instances: list[Debugger] = []
        # 保护登记表修改与批量重算；可重入以便上层在同一把锁内替换规则集
        self.lock = threading.RLock()
        self.clock: Clock = clock or monotonic_ms

    def register(self, instance: Debugger) -> None:
        with self.lock:
            self._instances.append(instance)

    def unregister(self, instance: Debugger) -> bool:
        with self.lock:
            for idx, existing in enumerate(self._instances):
                if existing is instance:
                    del self._instances[idx]
                    return True
        return False

    def recompute_all(self, rules: RuleSet) -> None:
        """按给定规则集重新计算每个已登记实例的 enabled 标记。"""
        with self.lock:
            for instance in self._instances:
                instance.enabled = rules.is_enabled(instance.namespace)

    def tick(self, instance: Debugger) -> int:
        """返回距该实例上一次输出的毫秒数（首次输出为 0），并记录本次时间。"""
        now = self.clock()
        prev = instance.prev_time
        diff = 0.0 if prev is None else now - prev
        instance.prev_time = now
        return int(round(diff))

    def __contains__(self, instance: object) -> bool:
        with self.lock:
            return any(existing is instance for existing in self._instances)

    def __iter__(self) -> Iterator[Debugger]:
        with self.lock:
            return iter(list(self._instances))

    def __len__(self) -> int:
        with self.lock:
            return len(self._instances)


__all__ = ["InstanceRegistry", "Clock", "monotonic_ms"]
