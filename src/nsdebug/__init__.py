"""nsdebug：按命名空间开关的调试输出。

用法::

    from nsdebug import create_debug

    log = create_debug("api:users")
    log("loaded %d users in %s", 42, "cache")

通过环境变量 ``DEBUG`` 选择要输出的命名空间，例如 ``DEBUG=api:*,-api:internal``。
"""

from .config.settings import Settings, get_settings
from .core import (
    DebugContext,
    Debugger,
    DirectiveRegistry,
    Polarity,
    Rule,
    RuleSet,
    compile_selector,
    create_debug,
    disable,
    enable,
    get_context,
    get_formatters,
    is_enabled,
)

__all__ = [
    "DebugContext",
    "Debugger",
    "DirectiveRegistry",
    "Polarity",
    "Rule",
    "RuleSet",
    "Settings",
    "compile_selector",
    "create_debug",
    "disable",
    "enable",
    "get_context",
    "get_formatters",
    "get_settings",
    "is_enabled",
]
