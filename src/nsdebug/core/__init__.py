"""nsdebug.core 包。

命名空间匹配引擎（选择器编译 + enabled 判定）与消息格式化管线，
以及把它们串起来的 `Debugger` / `DebugContext`。
"""

from .context import (
    DebugContext,
    create_debug,
    disable,
    enable,
    get_context,
    get_formatters,
    is_enabled,
    write_stderr,
)
from .formatting import (
    DirectiveRegistry,
    Formatter,
    apply_formatters,
    coerce,
    format_args,
    render,
)
from .instance import Debugger, Sink
from .registry import InstanceRegistry
from .selector import compile_selector
from .types import Message, MessageKind, Polarity, Rule, RuleSet

__all__ = [
    "DebugContext",
    "Debugger",
    "DirectiveRegistry",
    "Formatter",
    "InstanceRegistry",
    "Message",
    "MessageKind",
    "Polarity",
    "Rule",
    "RuleSet",
    "Sink",
    "apply_formatters",
    "coerce",
    "compile_selector",
    "create_debug",
    "disable",
    "enable",
    "format_args",
    "get_context",
    "get_formatters",
    "is_enabled",
    "render",
    "write_stderr",
]
