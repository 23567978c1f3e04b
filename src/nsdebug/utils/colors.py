"""命名空间颜色选择与 ANSI 转义码工具。"""

from __future__ import annotations

import os
import sys
from typing import Optional, Sequence, TextIO

# 基础 8 色终端使用的调色板
BASIC_COLORS: tuple[int, ...] = (6, 2, 3, 4, 5, 1)

# 256 色终端使用的调色板（避开过暗/过亮的颜色）
EXTENDED_COLORS: tuple[int, ...] = (
    20, 21, 26, 27, 32, 33, 38, 39, 40, 41, 42, 43, 44, 45, 56, 57, 62, 63,
    68, 69, 74, 75, 76, 77, 78, 79, 80, 81, 92, 93, 98, 99, 112, 113, 128,
    129, 134, 135, 148, 149, 160, 161, 162, 163, 164, 165, 166, 167, 168,
    169, 170, 171, 172, 173, 178, 179, 184, 185, 196, 197, 198, 199, 200,
    201, 202, 203, 204, 205, 206, 207, 208, 209, 214, 215, 220, 221,
)

RESET = "\x1b[0m"


def namespace_hash(namespace: str) -> int:
    """计算命名空间的 32 位有符号字符串哈希。

    算法为 ``hash = hash * 31 + code``，每一步都截断为有符号 32 位整数，
    因此同一命名空间在不同进程中得到的结果一致（与内置 ``hash()`` 不同）。
    """

    h = 0
    for ch in namespace:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def select_color(namespace: str, palette: Sequence[int] = BASIC_COLORS) -> int:
    """根据命名空间确定性地从调色板中选出一个颜色编号。"""
    return palette[abs(namespace_hash(namespace)) % len(palette)]


def color_code(color: int) -> str:
    # 0-7 使用基础前景色，其余走 256 色扩展序列
    return "\x1b[3" + (str(color) if color < 8 else "8;5;" + str(color))


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """判断输出流是否适合彩色输出。

    ``NO_COLOR`` 环境变量存在时总是返回 False；否则以 ``isatty()`` 为准。
    """

    if "NO_COLOR" in os.environ:
        return False
    stream = stream if stream is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # 已关闭的流
        return False


__all__ = [
    "BASIC_COLORS",
    "EXTENDED_COLORS",
    "RESET",
    "namespace_hash",
    "select_color",
    "color_code",
    "supports_color",
]
