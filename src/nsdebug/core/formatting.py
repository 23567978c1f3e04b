"""消息格式化管线。

分两步：

1. `apply_formatters`：用可插拔的指令表（`DirectiveRegistry`）展开模板中的
   ``%<letter>``，被内联的参数从位置参数中移除；
2. `render`：处理剩余的内建指令（``%s %d %i %f %j %o %O %c %%``），
   未被消费的参数以空格拼接在末尾。

整个管线不会因为参数缺失或未知指令而抛出异常。
"""

from __future__ import annotations

import json
import pprint
import re
import traceback
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from nsdebug.utils.log import logger

from .types import Message, MessageKind

Formatter = Callable[[Any], Any]

_DIRECTIVE_RE = re.compile(r"%([a-zA-Z%])")


class DirectiveRegistry:
    """指令字母到值格式化函数的映射表。

    既可以通过 `register` / `unregister` 操作，也支持字典语法::

        directives["h"] = lambda value: value.hex()
    """

    def __init__(self) -> None:
        self._registry: dict[str, Formatter] = {}

    def register(self, key: str, fn: Formatter) -> None:
        # 模板中只会匹配到单个 ASCII 字母，其它 key 永远不会被调用
        if not isinstance(key, str) or len(key) != 1 or not key.isascii() or not key.isalpha():
            raise ValueError(f"directive key must be a single ASCII letter: {key!r}")
        if not callable(fn):
            raise TypeError("directive formatter must be callable")
        self._registry[key] = fn

    def unregister(self, key: str) -> bool:
        return self._registry.pop(key, None) is not None

    def get(self, key: str) -> Optional[Formatter]:
        return self._registry.get(key)

    def snapshot(self) -> dict[str, Formatter]:
        """返回当前指令表的浅拷贝，格式化过程中的修改不会影响本次调用。"""
        return dict(self._registry)

    def clear(self) -> None:
        self._registry.clear()

    def keys(self):
        return self._registry.keys()

    def __getitem__(self, key: str) -> Formatter:
        return self._registry[key]

    def __setitem__(self, key: str, fn: Formatter) -> None:
        self.register(key, fn)

    def __delitem__(self, key: str) -> None:
        del self._registry[key]

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    def __len__(self) -> int:
        return len(self._registry)


def coerce(value: Any) -> Any:
    """异常对象转为可读文本：有 traceback 时使用完整 traceback，否则使用消息。"""

    if isinstance(value, BaseException):
        if value.__traceback__ is not None:
            lines = traceback.format_exception(type(value), value, value.__traceback__)
            return "".join(lines).rstrip()
        return str(value) or type(value).__name__
    return value


def to_message(args: Sequence[Any]) -> Message:
    """在管线入口处一次性决定首个参数是模板文本还是结构化值。"""

    if not args:
        return Message(kind=MessageKind.TEXT, head="", args=[])
    head = coerce(args[0])
    if isinstance(head, str):
        return Message(kind=MessageKind.TEXT, head=head, args=list(args[1:]))
    return Message(kind=MessageKind.STRUCTURED, head=head, args=list(args[1:]))


def apply_formatters(
    args: Sequence[Any], directives: Optional[Mapping[str, Formatter]] = None
) -> list[Any]:
    """用自定义指令展开模板，返回 ``[template, *remaining_args]``。

    - ``%%`` 原样保留，不消费参数
    - 其它 ``%<letter>`` 都会推进参数游标；若指令表中存在该字母且游标处有参数，
      则调用格式化函数并把返回值内联到模板中，同时从参数列表中删除该参数
    - 未注册的字母保持原样，对应参数也保留在列表中
    """

    message = to_message(args)
    if message.kind is MessageKind.STRUCTURED:
        # 非文本的首个参数整体交给 %O 渲染
        values: list[Any] = ["%O", message.head, *message.args]
    else:
        values = [message.head, *message.args]

    table = dict(directives) if directives else {}
    if not table:
        return values

    index = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal index
        token = match.group(0)
        if token == "%%":
            return token

        index += 1
        letter = match.group(1)
        formatter = table.get(letter)
        if formatter is None or index >= len(values):
            return token

        try:
            replacement = str(formatter(values[index]))
        except Exception:
            logger.opt(exception=True).warning(
                "directive %{} raised; leaving it unexpanded", letter
            )
            return token

        # 参数已经内联进模板，不能再按位置渲染一次
        del values[index]
        index -= 1
        return replacement

    values[0] = _DIRECTIVE_RE.sub(_replace, values[0])
    return values


def inspect_value(value: Any) -> str:
    """单行检视（%o 以及末尾多余参数使用）。"""
    return repr(value)


def _format_str(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _format_int(value: Any) -> str:
    try:
        number = float(value) if isinstance(value, str) else value
        return str(int(number))
    except (TypeError, ValueError, OverflowError):
        return "NaN"


def _format_float(value: Any) -> str:
    try:
        return str(float(value))
    except (TypeError, ValueError, OverflowError):
        return "NaN"


def _format_json(value: Any) -> str:
    try:
        return json.dumps(value, default=str, ensure_ascii=False)
    except ValueError:
        # 循环引用
        return "[Circular]"
    except TypeError:
        # 例如 key 不是字符串/标量的 dict，default 钩子对 key 不生效
        return str(value)


def _format_pretty(value: Any) -> str:
    return pprint.pformat(value)


_BUILTINS: dict[str, Formatter] = {
    "s": _format_str,
    "d": _format_int,
    "i": _format_int,
    "f": _format_float,
    "j": _format_json,
    "o": inspect_value,
    "O": _format_pretty,
    "c": lambda value: "",
}


def render(args: Sequence[Any]) -> str:
    """把 ``[template, *args]`` 渲染成一行文本。

    参数不足时指令保持字面量；未知指令不消费参数；
    多余参数按空格追加在末尾（字符串原样，其它值使用单行检视）。
    """

    if not args:
        return ""

    template = args[0]
    rest = list(args[1:])
    if not isinstance(template, str):
        template = inspect_value(template)

    position = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal position
        letter = match.group(1)
        if letter == "%":
            return "%"
        handler = _BUILTINS.get(letter)
        if handler is None or position >= len(rest):
            return match.group(0)
        value = rest[position]
        position += 1
        return handler(value)

    text = _DIRECTIVE_RE.sub(_replace, template)
    tail = [v if isinstance(v, str) else inspect_value(v) for v in rest[position:]]
    return " ".join([text, *tail])


def format_args(
    args: Sequence[Any], directives: Optional[Mapping[str, Formatter]] = None
) -> str:
    """完整管线：`apply_formatters` 之后 `render`。"""
    return render(apply_formatters(args, directives))


__all__ = [
    "Formatter",
    "DirectiveRegistry",
    "coerce",
    "to_message",
    "apply_formatters",
    "render",
    "format_args",
    "inspect_value",
]
