"""
Unit tests for the PDF and Office sniffers.
"""

import pytest

from cleansweep.extraction.document_sniffers import (
    LegacyOfficeSniffer,
    OfficeXMLSniffer,
    PDFSniffer,
)


class TestPDFSniffer:
    """Tests for PDF text and page extraction."""

    @pytest.fixture
    def sniffer(self):
        return PDFSniffer()

    def test_extracts_text_show_operand(self, sniffer):
        meta = sniffer.sniff(b"stream\n(Hello World)Tj\nendstream", ".pdf")

        assert "Hello World" in meta["content"]
        assert "pageEstimate" not in meta

    def test_crlf_after_stream_keyword(self, sniffer):
        meta = sniffer.sniff(b"stream\r\n(Windows line)Tj\r\nendstream", ".pdf")

        assert meta["content"] == "Windows line"

    def test_stream_without_eol_is_ignored(self, sniffer):
        assert sniffer.sniff(b"streamX(Hidden)Tj endstream", ".pdf") is None

    def test_counts_page_objects_not_page_trees(self, sniffer):
        data = b"1 0 obj << /Type /Page >>\n2 0 obj << /Type /Pages >>\n3 0 obj << /Type/Page >>"

        meta = sniffer.sniff(data, ".pdf")

        assert meta == {"pageEstimate": 2}

    def test_escaped_parentheses(self, sniffer):
        meta = sniffer.sniff(b"stream\n(a\\(b\\)c)Tj\nendstream", ".pdf")

        assert meta["content"] == "a(b)c"

    def test_backslash_newline_and_carriage_return_escapes(self, sniffer):
        meta = sniffer.sniff(b"stream\n(a\\\\b\\nc\\rd)Tj\nendstream", ".pdf")

        assert meta["content"] == "a\\b cd"

    def test_unknown_escape_kept_literally(self, sniffer):
        meta = sniffer.sniff(b"stream\n(x\\ty)Tj\nendstream", ".pdf")

        assert meta["content"] == "x\\ty"

    def test_runs_without_alphanumerics_are_dropped(self, sniffer):
        meta = sniffer.sniff(b"stream\n(   )Tj (--)Tj (ok1)Tj\nendstream", ".pdf")

        assert meta["content"] == "ok1"

    def test_whitespace_collapsed(self, sniffer):
        meta = sniffer.sniff(b"stream\n(Hello)Tj (   World  )Tj\nendstream", ".pdf")

        assert meta["content"] == "Hello World"

    def test_endstream_alone_opens_nothing(self, sniffer):
        assert sniffer.sniff(b"endstream\n(Nope)Tj\n", ".pdf") is None

    def test_content_capped(self, sniffer):
        data = b"stream\n" + b"(abcdefghij)Tj " * 300 + b"\nendstream"

        meta = sniffer.sniff(data, ".pdf")

        assert len(meta["content"]) == 2000

    def test_stops_opening_streams_after_budget(self, sniffer):
        first = b"stream\n" + b"(abcdefghij)Tj " * 260 + b"\nendstream\n"
        second = b"stream\n(SECOND)Tj\nendstream"

        text = sniffer.extract_text(first + second)

        assert text.startswith("abcdefghij")
        assert "SECOND" not in text

    def test_later_streams_read_under_budget(self, sniffer):
        first = b"stream\n(First)Tj\nendstream\n"
        second = b"stream\n(Second)Tj\nendstream"

        assert sniffer.extract_text(first + second) == "First Second"

    def test_high_bytes_survive(self, sniffer):
        meta = sniffer.sniff(b"stream\n(caf\xe9)Tj\nendstream", ".pdf")

        assert meta["content"] == "café"

    def test_c1_and_separator_bytes_kept(self, sniffer):
        meta = sniffer.sniff(b"stream\n(Wait\x85 now\x1fok\x85)Tj\nendstream", ".pdf")

        assert meta["content"] == "Wait\x85 now\x1fok\x85"

    def test_empty_input(self, sniffer):
        assert sniffer.sniff(b"", ".pdf") is None

    def test_idempotent(self, sniffer):
        data = b"stream\n(Repeat me)Tj\nendstream /Type /Page"

        assert sniffer.sniff(data, ".pdf") == sniffer.sniff(data, ".pdf")


class TestOfficeXMLSniffer:
    """Tests for Office Open XML property extraction."""

    @pytest.fixture
    def sniffer(self):
        return OfficeXMLSniffer()

    def test_core_properties(self, sniffer):
        data = (
            b"PK\x03\x04<dc:title>Report</dc:title><dc:subject>Q3</dc:subject>"
            b"<dc:creator>Ann Lee</dc:creator><dc:description>Numbers</dc:description>"
            b"<cp:keywords>sales, q3</cp:keywords>"
        )

        meta = sniffer.sniff(data, ".xlsx")

        assert meta == {
            "title": "Report",
            "subject": "Q3",
            "author": "Ann Lee",
            "description": "Numbers",
            "keywords": "sales, q3",
        }

    def test_title_capped(self, sniffer):
        data = b"<dc:title>" + b"t" * 500 + b"</dc:title>"

        meta = sniffer.sniff(data, ".pptx")

        assert len(meta["title"]) == 200

    def test_author_capped(self, sniffer):
        data = b"<dc:creator>" + b"a" * 150 + b"</dc:creator>"

        assert len(sniffer.sniff(data, ".docx")["author"]) == 100

    @pytest.mark.parametrize("tag, field, cap", [
        ("dc:subject", "subject", 200),
        ("dc:description", "description", 300),
        ("cp:keywords", "keywords", 200),
    ])
    def test_property_caps(self, sniffer, tag, field, cap):
        data = f"<{tag}>{'x' * 400}</{tag}>".encode()

        assert len(sniffer.sniff(data, ".docx")[field]) == cap

    def test_body_keeps_c1_bytes(self, sniffer):
        meta = sniffer.sniff(b"<w:t>\x85</w:t>", ".docx")

        assert meta == {"content": "\x85"}

    def test_docx_run_text(self, sniffer):
        data = (
            b"<w:p><w:r><w:t>Hello</w:t></w:r><w:r><w:tab/>"
            b"<w:t xml:space=\"preserve\">World</w:t></w:r></w:p>"
        )

        meta = sniffer.sniff(data, ".docx")

        assert meta["content"] == "Hello World"

    def test_run_text_only_for_docx(self, sniffer):
        data = b"<w:t>Hello</w:t>"

        assert sniffer.sniff(data, ".xlsx") is None

    def test_body_capped(self, sniffer):
        data = b"<w:t>" + b"word " * 100 + b"</w:t>"
        data = data * 10

        meta = sniffer.sniff(data, ".docx")

        assert len(meta["content"]) <= 1500

    def test_compressed_container_is_opaque_by_default(self, sniffer, docx_bytes):
        data = docx_bytes("Compressed Title", ["Body text"])

        assert sniffer.sniff(data, ".docx") is None

    def test_decompress_reads_compressed_parts(self, docx_bytes):
        sniffer = OfficeXMLSniffer(decompress=True)
        data = docx_bytes("Compressed Title", ["First paragraph", "Second"])

        meta = sniffer.sniff(data, ".docx")

        assert meta["title"] == "Compressed Title"
        assert meta["content"] == "First paragraph Second"

    def test_decompress_falls_back_to_raw_bytes(self):
        sniffer = OfficeXMLSniffer(decompress=True)

        meta = sniffer.sniff(b"not a zip <dc:title>Raw</dc:title>", ".docx")

        assert meta == {"title": "Raw"}

    def test_empty_input(self, sniffer):
        assert sniffer.sniff(b"", ".docx") is None


class TestLegacyOfficeSniffer:
    """Tests for printable-text salvage from OLE files."""

    @pytest.fixture
    def sniffer(self):
        return LegacyOfficeSniffer()

    def test_salvages_printable_text(self, sniffer):
        data = (
            b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 50
            + b"This is a legacy Word document body" + b"\x00" * 20
        )

        meta = sniffer.sniff(data, ".doc")

        assert meta == {"content": "This is a legacy Word document body"}

    def test_long_gaps_shrink(self, sniffer):
        data = b"Budget spreadsheet" + b"\x00" * 10 + b"for the year"

        meta = sniffer.sniff(data, ".xls")

        assert meta["content"] == "Budget spreadsheet  for the year"

    def test_trivial_fragments_ignored(self, sniffer):
        assert sniffer.sniff(b"\x00\x00short\x00\x00", ".ppt") is None

    def test_content_capped(self, sniffer):
        meta = sniffer.sniff(b"x" * 5000, ".doc")

        assert len(meta["content"]) == 1500
