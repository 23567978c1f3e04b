"""测试颜色选择工具。"""

import io
import os
from unittest.mock import MagicMock, patch

from nsdebug.utils.colors import (
    BASIC_COLORS,
    EXTENDED_COLORS,
    color_code,
    namespace_hash,
    select_color,
    supports_color,
)


class TestNamespaceHash:
    """测试 namespace_hash 函数。"""

    def test_empty(self):
        assert namespace_hash("") == 0

    def test_known_values(self):
        """测试与 ``h * 31 + code`` 的计算结果一致。"""
        assert namespace_hash("a") == 97
        assert namespace_hash("ab") == 97 * 31 + 98

    def test_wraps_to_signed_32_bit(self):
        value = namespace_hash("a-fairly-long:namespace:string")
        assert -(2**31) <= value < 2**31

    def test_stable(self):
        assert namespace_hash("server:http") == namespace_hash("server:http")


class TestSelectColor:
    """测试 select_color 函数。"""

    def test_basic_palette(self):
        assert select_color("a") == BASIC_COLORS[97 % len(BASIC_COLORS)]

    def test_extended_palette(self):
        assert select_color("server", EXTENDED_COLORS) in EXTENDED_COLORS

    def test_negative_hash_uses_absolute_value(self):
        namespace = "zzzzzzzzzzzz"
        h = namespace_hash(namespace)
        assert select_color(namespace) == BASIC_COLORS[abs(h) % len(BASIC_COLORS)]


class TestColorCode:
    """测试 color_code 函数。"""

    def test_basic(self):
        assert color_code(6) == "\x1b[36"

    def test_extended(self):
        assert color_code(160) == "\x1b[38;5;160"


class TestSupportsColor:
    """测试 supports_color 函数。"""

    def test_tty(self):
        stream = MagicMock()
        stream.isatty.return_value = True
        with patch.dict(os.environ, {}, clear=True):
            assert supports_color(stream) is True

    def test_not_tty(self):
        with patch.dict(os.environ, {}, clear=True):
            assert supports_color(io.StringIO()) is False

    def test_no_color_env(self):
        stream = MagicMock()
        stream.isatty.return_value = True
        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            assert supports_color(stream) is False

    def test_stream_without_isatty(self):
        with patch.dict(os.environ, {}, clear=True):
            assert supports_color(object()) is False  # type: ignore[arg-type]

    def test_closed_stream(self):
        stream = io.StringIO()
        stream.close()
        with patch.dict(os.environ, {}, clear=True):
            assert supports_color(stream) is False
