"""命名空间选择器的编译。

选择器是逗号和/或空白分隔的 token 列表，例如 ``"api:*,-api:internal"``：

- 以 ``-`` 开头的 token 是 deny 规则，其余为 allow 规则
- ``*`` 是不受分段限制的通配符，匹配总是针对完整的命名空间字符串
- 空 token 被忽略；任何输入都能编译出某个规则集，不存在"非法选择器"
"""

from __future__ import annotations

import re
from typing import Any, Iterator

from .types import Polarity, Rule, RuleSet

_SPLIT_RE = re.compile(r"[\s,]+")


def iter_tokens(selector: Any) -> Iterator[str]:
    """按顺序返回选择器中的非空 token；非字符串输入视为空选择器。"""

    if not isinstance(selector, str):
        return
    for token in _SPLIT_RE.split(selector):
        if token:
            yield token


def compile_rule(token: str) -> Rule:
    if token.startswith("-"):
        return Rule(polarity=Polarity.DENY, pattern=token[1:])
    return Rule(polarity=Polarity.ALLOW, pattern=token)


def compile_selector(selector: Any) -> RuleSet:
    """把选择器字符串编译为 `RuleSet`。"""

    allow: list[Rule] = []
    deny: list[Rule] = []
    for token in iter_tokens(selector):
        rule = compile_rule(token)
        if rule.polarity is Polarity.DENY:
            deny.append(rule)
        else:
            allow.append(rule)
    return RuleSet(allow=tuple(allow), deny=tuple(deny))


__all__ = ["compile_selector", "compile_rule", "iter_tokens"]
