"""测试选择器编译与 enabled 判定。"""

import pytest

from nsdebug.core.selector import compile_rule, compile_selector, iter_tokens
from nsdebug.core.types import Polarity, Rule, RuleSet


class TestIterTokens:
    """测试 iter_tokens 函数。"""

    def test_split_on_commas(self):
        """测试按逗号拆分。"""
        assert list(iter_tokens("a,b,c")) == ["a", "b", "c"]

    def test_split_on_whitespace_and_commas(self):
        """测试逗号与空白混合分隔。"""
        assert list(iter_tokens(" a ,\tb\n, ,c ")) == ["a", "b", "c"]

    def test_empty_and_none(self):
        """测试空字符串与非字符串输入。"""
        assert list(iter_tokens("")) == []
        assert list(iter_tokens("  , ,  ")) == []
        assert list(iter_tokens(None)) == []
        assert list(iter_tokens(42)) == []


class TestCompileRule:
    """测试单个 token 的编译。"""

    def test_allow_token(self):
        rule = compile_rule("api:*")
        assert rule.polarity is Polarity.ALLOW
        assert rule.pattern == "api:*"

    def test_deny_token(self):
        rule = compile_rule("-api:internal")
        assert rule.polarity is Polarity.DENY
        assert rule.pattern == "api:internal"

    def test_bare_dash_matches_only_empty_namespace(self):
        """测试单独的 '-' 只匹配空命名空间。"""
        rule = compile_rule("-")
        assert rule.polarity is Polarity.DENY
        assert rule.matches("")
        assert not rule.matches("api")


class TestRuleMatching:
    """测试规则的通配符匹配语义。"""

    def test_literal_full_match(self):
        """测试字面量必须整串匹配而不是子串匹配。"""
        rule = Rule(polarity=Polarity.ALLOW, pattern="api")
        assert rule.matches("api")
        assert not rule.matches("api:users")
        assert not rule.matches("my-api")

    def test_wildcard_crosses_segments(self):
        """测试 * 可以跨越 ':' 分段。"""
        rule = Rule(polarity=Polarity.ALLOW, pattern="api:*")
        assert rule.matches("api:")
        assert rule.matches("api:users")
        assert rule.matches("api:users:list")
        assert not rule.matches("apix")

    def test_wildcard_in_middle(self):
        rule = Rule(polarity=Polarity.ALLOW, pattern="app:*:db")
        assert rule.matches("app:worker:db")
        assert rule.matches("app:a:b:db")
        assert not rule.matches("app:worker:cache")

    def test_regex_metacharacters_are_literal(self):
        """测试正则元字符按字面量处理。"""
        rule = Rule(polarity=Polarity.ALLOW, pattern="a.b+(c)")
        assert rule.matches("a.b+(c)")
        assert not rule.matches("aXb+(c)")
        assert not rule.matches("a.bb(c)")

    def test_star_only_matches_everything(self):
        rule = Rule(polarity=Polarity.ALLOW, pattern="*")
        assert rule.matches("")
        assert rule.matches("anything:at:all")

    def test_rule_is_frozen(self):
        rule = Rule(polarity=Polarity.ALLOW, pattern="x")
        with pytest.raises(Exception):
            rule.pattern = "y"  # type: ignore[misc]


class TestCompileSelector:
    """测试 compile_selector 函数。"""

    def test_groups_by_polarity_preserving_order(self):
        rules = compile_selector("a,-b,c,-d")
        assert [r.pattern for r in rules.allow] == ["a", "c"]
        assert [r.pattern for r in rules.deny] == ["b", "d"]

    def test_empty_input_enables_nothing(self):
        for selector in ("", "   ", None):
            rules = compile_selector(selector)
            assert rules.empty
            assert not rules.is_enabled("api")

    def test_star_enables_everything(self):
        rules = compile_selector("*")
        assert rules.is_enabled("api")
        assert rules.is_enabled("x:y:z")
        assert rules.is_enabled("")


class TestIsEnabled:
    """测试 RuleSet.is_enabled 的判定顺序。"""

    def test_deny_precedence(self):
        """测试 deny 规则优先于 allow 规则。"""
        rules = compile_selector("api:*,-api:internal")
        assert rules.is_enabled("api:public")
        assert not rules.is_enabled("api:internal")

    def test_deny_precedence_regardless_of_token_order(self):
        rules = compile_selector("-api:internal api:*")
        assert not rules.is_enabled("api:internal")
        assert rules.is_enabled("api:public")

    def test_default_deny(self):
        rules = compile_selector("api:*")
        assert not rules.is_enabled("worker")

    def test_trailing_star_namespace_always_enabled(self):
        """测试以 * 结尾的命名空间无视规则集总是启用。"""
        assert RuleSet().is_enabled("lib:*")
        assert compile_selector("-lib:*").is_enabled("lib:*")
        assert compile_selector("-*").is_enabled("*")

    def test_deny_all(self):
        rules = compile_selector("*,-*")
        assert not rules.is_enabled("api")


class TestToSelector:
    """测试规则集还原为选择器字符串。"""

    def test_allow_then_deny(self):
        rules = compile_selector("-b a -d c")
        assert rules.to_selector() == "a,c,-b,-d"

    def test_empty(self):
        assert RuleSet().to_selector() == ""

    @pytest.mark.parametrize(
        "selector",
        ["api:*,-api:internal", "*", "a:*:b, -a:x:b", "-x", "a.b,c+d"],
    )
    def test_round_trip_is_equivalent(self, selector):
        """测试还原后的选择器重新编译得到等价的规则集。"""
        compiled = compile_selector(selector)
        restored = compile_selector(compiled.to_selector())

        assert restored == compiled
        for namespace in ("api:internal", "api:public", "a:x:b", "a:y:b", "x", "a.b", "c+d"):
            assert restored.is_enabled(namespace) == compiled.is_enabled(namespace)
