"""
Unit tests for the plain-text sniffer.
"""

import pytest

from cleansweep.extraction.text_sniffer import PlainTextSniffer


class TestPlainTextSniffer:
    """Tests for PlainTextSniffer."""

    @pytest.fixture
    def sniffer(self):
        return PlainTextSniffer()

    def test_returns_text(self, sniffer):
        assert sniffer.sniff(b"hello\nworld", ".txt") == {"content": "hello\nworld"}

    def test_strips_nul_bytes(self, sniffer):
        assert sniffer.sniff(b"a\x00b", ".md") == {"content": "ab"}

    def test_invalid_utf8_replaced(self, sniffer):
        assert sniffer.sniff(b"ok \xff", ".log") == {"content": "ok \ufffd"}

    def test_limited_to_first_1500_bytes(self, sniffer):
        meta = sniffer.sniff(b"a" * 2000, ".txt")

        assert meta["content"] == "a" * 1500

    def test_empty_input(self, sniffer):
        assert sniffer.sniff(b"", ".txt") is None
        assert sniffer.sniff(b"\x00\x00", ".txt") is None

    def test_code_extensions_supported(self, sniffer):
        for ext in (".py", ".js", ".csv", ".yaml", ".rtf"):
            assert sniffer.supports(ext)
        assert not sniffer.supports(".exe")
