from __future__ import annotations

import re
from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Polarity(str, Enum):
    """选择器规则的极性。"""

    ALLOW = "allow"
    DENY = "deny"


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """把带 ``*`` 通配符的命名空间模式编译为整串匹配的正则。

    ``*`` 匹配任意字符序列（可以跨越 ``:`` 等分隔符），其余字符按字面量匹配。
    """

    body = ".*?".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(body, re.DOTALL)


class Rule(BaseModel):
    """由单个选择器 token 编译得到的匹配规则。

    `pattern` 保存去掉前导 ``-`` 之后的原始 token，用于 `RuleSet.to_selector()`
    无损地还原选择器字符串。
    """

    model_config = ConfigDict(frozen=True)

    polarity: Polarity
    pattern: str

    _regex: re.Pattern[str] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._regex = glob_to_regex(self.pattern)

    def matches(self, namespace: str) -> bool:
        return self._regex.fullmatch(namespace) is not None

    def to_token(self) -> str:
        if self.polarity is Polarity.DENY:
            return f"-{self.pattern}"
        return self.pattern


class RuleSet(BaseModel):
    """一次配置变更编译出的完整规则集（allow / deny 两个有序列表）。

    规则集本身不可变；配置变化时整体替换，读取方不会看到半更新的状态。
    """

    model_config = ConfigDict(frozen=True)

    allow: tuple[Rule, ...] = Field(default_factory=tuple)
    deny: tuple[Rule, ...] = Field(default_factory=tuple)

    def is_enabled(self, namespace: str) -> bool:
        """判断命名空间是否被启用。

        依次检查（先命中者生效）：
        1. 命名空间本身以 ``*`` 结尾 -> 总是启用，不经过任何 deny 规则
        2. 任一 deny 规则匹配 -> 禁用
        3. 任一 allow 规则匹配 -> 启用
        4. 默认禁用
        """

        if namespace.endswith("*"):
            return True

        for rule in self.deny:
            if rule.matches(namespace):
                return False
        for rule in self.allow:
            if rule.matches(namespace):
                return True

        return False

    def to_selector(self) -> str:
        """把规则集渲染回等价的选择器字符串（allow 在前，deny 加 ``-`` 前缀）。"""
        return ",".join(rule.to_token() for rule in (*self.allow, *self.deny))

    @property
    def empty(self) -> bool:
        return not self.allow and not self.deny


class MessageKind(str, Enum):
    """格式化管线入口处对首个参数的分类。"""

    TEXT = "text"
    STRUCTURED = "structured"


class Message(BaseModel):
    """进入格式化管线的一条消息。

    - TEXT：`head` 是模板字符串，`args` 是位置参数
    - STRUCTURED：`head` 是任意值，整体通过 ``%O`` 渲染
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: MessageKind
    head: Any = None
    args: Sequence[Any] = Field(default_factory=list)


__all__ = [
    "Polarity",
    "Rule",
    "RuleSet",
    "MessageKind",
    "Message",
    "glob_to_regex",
]
