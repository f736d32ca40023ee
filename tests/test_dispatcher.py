"""
Unit tests for the extraction dispatcher.
"""

import pytest

from cleansweep.config.settings import ExtractionConfig
from cleansweep.extraction import MetadataExtractor, extract
from cleansweep.extraction.base import FormatKind


class TestMetadataExtractor:
    """Tests for MetadataExtractor."""

    @pytest.fixture
    def extractor(self):
        return MetadataExtractor()

    def test_unknown_extension(self, extractor, tmp_path):
        path = tmp_path / "blob.xyz"
        path.write_bytes(b"anything at all")

        assert extractor.extract(path) == {}

    def test_unknown_extension_never_read(self, extractor, tmp_path):
        assert extractor.extract(tmp_path / "missing.xyz") == {}

    def test_png_file(self, extractor, tmp_path, png_bytes):
        path = tmp_path / "shot.png"
        path.write_bytes(png_bytes(1920, 1080))

        assert extractor.extract(path) == {"width": 1920, "height": 1080, "likelyScreenshot": True}

    def test_uppercase_extension(self, extractor, tmp_path, png_bytes):
        path = tmp_path / "SHOT.PNG"
        path.write_bytes(png_bytes(640, 480))

        assert extractor.extract(path) == {"width": 640, "height": 480}

    def test_explicit_extension(self, extractor, tmp_path):
        path = tmp_path / "notes"
        path.write_bytes(b"plain words")

        assert extractor.extract(path, ".txt") == {"content": "plain words"}
        assert extractor.extract(path) == {}

    def test_text_prefix(self, extractor, tmp_path):
        path = tmp_path / "big.txt"
        payload = bytes(ord("a") + i % 26 for i in range(10000))
        path.write_bytes(payload)

        meta = extractor.extract(path)

        assert len(meta["content"]) <= 1500
        assert meta["content"] == payload[:1500].decode("ascii")

    @pytest.mark.parametrize("name", [
        "empty.pdf", "empty.docx", "empty.doc", "empty.jpg", "empty.png", "empty.txt",
    ])
    def test_zero_byte_files(self, extractor, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b"")

        assert extractor.extract(path) == {}

    def test_missing_file_reports_error(self, extractor, tmp_path):
        meta = extractor.extract(tmp_path / "gone.txt")

        assert meta == {"error": "File could not be read"}

    def test_directory_reports_error(self, extractor, tmp_path):
        folder = tmp_path / "folder.pdf"
        folder.mkdir()

        assert "error" in extractor.extract(folder)

    def test_sniffer_failure_becomes_error(self, extractor, tmp_path, monkeypatch):
        path = tmp_path / "bad.png"
        path.write_bytes(b"\x89P" + b"\x00" * 30)

        def explode(data, extension):
            raise RuntimeError("boom")

        monkeypatch.setattr(extractor.sniffers[FormatKind.PNG], "sniff", explode)

        assert extractor.extract(path) == {"error": "boom"}

    def test_idempotent(self, extractor, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"stream\n(Same every time)Tj\nendstream /Type /Page")

        assert extractor.extract(path) == extractor.extract(path)

    def test_full_read_cap(self, tmp_path):
        extractor = MetadataExtractor(ExtractionConfig(max_full_read_bytes=20))
        path = tmp_path / "late.pdf"
        path.write_bytes(b"%PDF-1.4\n" + b" " * 50 + b"stream\n(Late)Tj\nendstream")

        assert extractor.extract(path) == {}
        assert MetadataExtractor().extract(path) == {"content": "Late"}

    def test_decompress_setting_reaches_office_sniffer(self):
        extractor = MetadataExtractor(ExtractionConfig(decompress_office=True))

        assert extractor.sniffer_for(".docx").decompress is True
        assert MetadataExtractor().sniffer_for(".docx").decompress is False

    def test_supported_extensions(self, extractor):
        supported = extractor.supported_extensions

        for ext in (".pdf", ".docx", ".xls", ".jpeg", ".png", ".txt", ".py"):
            assert ext in supported
        assert supported == sorted(supported)

    def test_supports(self, extractor):
        assert extractor.supports("Report.PDF")
        assert not extractor.supports("archive.zip")
        assert not extractor.supports("Makefile")

    def test_module_level_extract(self, tmp_path):
        path = tmp_path / "hello.md"
        path.write_text("# Title")

        assert extract(path) == {"content": "# Title"}
