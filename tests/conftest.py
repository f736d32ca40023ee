"""
Shared fixtures for the test suite.
"""

import zipfile
from pathlib import Path

import pytest


@pytest.fixture
def png_bytes():
    """Build a minimal PNG header with the given dimensions."""
    def build(width: int, height: int) -> bytes:
        return (
            b"\x89PNG\r\n\x1a\n"
            + (13).to_bytes(4, "big")
            + b"IHDR"
            + width.to_bytes(4, "big")
            + height.to_bytes(4, "big")
            + b"\x08\x02\x00\x00\x00"
        )
    return build


@pytest.fixture
def docx_bytes(tmp_path):
    """Build a deflate-compressed .docx container."""
    def build(title: str, paragraphs) -> bytes:
        path = tmp_path / "built.docx"
        core = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<cp:coreProperties><dc:title>' + title + '</dc:title></cp:coreProperties>'
        )
        body = "".join(
            '<w:p><w:r><w:t xml:space="preserve">' + text + '</w:t></w:r></w:p>'
            for text in paragraphs
        )
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("[Content_Types].xml", "<Types/>")
            archive.writestr("docProps/core.xml", core)
            archive.writestr("word/document.xml", "<w:document><w:body>" + body + "</w:body></w:document>")
        return path.read_bytes()
    return build


@pytest.fixture
def messy_folder(tmp_path, png_bytes) -> Path:
    """A folder with a handful of typical downloads."""
    folder = tmp_path / "Downloads"
    folder.mkdir()
    (folder / "notes.txt").write_text("shopping list: milk, eggs")
    (folder / "report.pdf").write_bytes(b"%PDF-1.4\nstream\n(Quarterly report)Tj\nendstream\n/Type /Page\n")
    (folder / "screen.png").write_bytes(png_bytes(1920, 1080))
    (folder / "icon.png").write_bytes(png_bytes(64, 64))
    (folder / "song.mp3").write_bytes(b"ID3" + b"\x00" * 32)
    (folder / "README").write_text("no extension")
    (folder / ".hidden").write_text("secret")
    (folder / "subdir").mkdir()
    return folder
