from __future__ import annotations

import math

_SECOND = 1000
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24

# 从大到小排列的 (阈值, 后缀)
_UNITS: tuple[tuple[int, str], ...] = (
    (_DAY, "d"),
    (_HOUR, "h"),
    (_MINUTE, "m"),
    (_SECOND, "s"),
)


def _round_half_up(value: float) -> int:
    # 内置 round() 是银行家舍入，这里需要 0.5 向上取整
    return int(math.floor(value + 0.5))


def humanize_ms(ms: float) -> str:
    """把毫秒数格式化为简短的人类可读字符串。

    >>> humanize_ms(0)
    '0ms'
    >>> humanize_ms(1500)
    '2s'
    >>> humanize_ms(90 * 60 * 1000)
    '2h'
    """

    abs_ms = abs(ms)
    for threshold, suffix in _UNITS:
        if abs_ms >= threshold:
            sign = -1 if ms < 0 else 1
            return f"{sign * _round_half_up(abs_ms / threshold)}{suffix}"
    if ms == int(ms):
        return f"{int(ms)}ms"
    return f"{ms}ms"


__all__ = ["humanize_ms"]
