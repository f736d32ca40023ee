"""
Document Sniffers
=================

Best-effort extraction from PDF, Office Open XML and legacy OLE Office
files working directly on raw bytes. None of these sniffers decode
compressed object streams; text stored in Flate streams or compressed
ZIP members is invisible to them unless decompression is enabled for
Office files.
"""

import io
import re
import zipfile
import zlib
from typing import FrozenSet, Iterator, List, Optional

from cleansweep.extraction.base import (
    AUTHOR_CAP,
    BaseSniffer,
    CONTENT_CAP,
    DESCRIPTION_CAP,
    ExtractedMetadata,
    FormatKind,
    KEYWORDS_CAP,
    PDF_CONTENT_CAP,
    SUBJECT_CAP,
    TITLE_CAP,
    truncate,
)
from cleansweep.extraction.binary_scanner import find_all, to_binary_str
from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)

# latin-1 view: only ASCII whitespace counts, 0x85 and 0x1C-0x1F are text
WHITESPACE_RUN = re.compile(r"\s+", re.ASCII)
ASCII_WHITESPACE = " \t\n\r\f\v"
ALNUM = re.compile(r"[a-zA-Z0-9]")


class PDFSniffer(BaseSniffer):
    """Pulls text-show operands and a page estimate out of a PDF.

    Assumptions:
    - a content region starts after ``stream`` followed by LF or CRLF and
      ends at the next ``endstream``
    - text is the operand of ``Tj``/``TJ``, i.e. a parenthesized string;
      a run ends at the first ``)`` not preceded by a backslash
    - ``/Type /Page`` marks a page object, ``/Type /Pages`` a page tree
    """

    STREAM = b"stream"
    ENDSTREAM = b"endstream"
    PAGE_MARKER = re.compile(rb"/Type\s*/Page(?!s)")
    # Stop opening new stream regions once this many characters are collected
    COLLECT_BUDGET = 2500

    @property
    def kind(self) -> FormatKind:
        return FormatKind.PDF

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset({'.pdf'})

    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        meta: ExtractedMetadata = {}

        text = self.extract_text(data)
        if text:
            meta["content"] = truncate(text, PDF_CONTENT_CAP)

        pages = len(self.PAGE_MARKER.findall(data))
        if pages:
            meta["pageEstimate"] = pages

        return meta or None

    def extract_text(self, data: bytes) -> Optional[str]:
        """Join the readable text runs of all uncompressed streams."""
        texts: List[str] = []
        collected = 0

        for region in self._stream_regions(data):
            if collected >= self.COLLECT_BUDGET:
                break
            for raw in self._paren_runs(region):
                decoded = self._unescape(to_binary_str(raw))
                if decoded.strip(ASCII_WHITESPACE) and ALNUM.search(decoded):
                    texts.append(decoded)
                    collected += len(decoded)

        joined = WHITESPACE_RUN.sub(" ", " ".join(texts)).strip(ASCII_WHITESPACE)
        return joined or None

    def _stream_regions(self, data: bytes) -> Iterator[bytes]:
        """Yield the bytes between each ``stream`` EOL and ``endstream``."""
        resume = 0
        for start in find_all(data, self.STREAM):
            if start < resume:
                continue
            body = start + len(self.STREAM)

            # "stream" inside a stray "endstream" opens nothing
            if data[max(0, start - 3):start] == b"end":
                continue

            if data[body:body + 2] == b"\r\n":
                body += 2
            elif data[body:body + 1] == b"\n":
                body += 1
            else:
                continue

            end = data.find(self.ENDSTREAM, body)
            if end == -1:
                return
            yield data[body:end]
            resume = end + len(self.ENDSTREAM)

    @staticmethod
    def _paren_runs(region: bytes) -> Iterator[bytes]:
        """Yield the inside of each parenthesized string in ``region``."""
        pos = 0
        size = len(region)
        while True:
            opening = region.find(b"(", pos)
            if opening == -1:
                return
            i = opening + 1
            while i < size:
                byte = region[i]
                if byte == 0x5C:  # backslash escapes the next byte
                    i += 2
                    continue
                if byte == 0x29:  # ")"
                    break
                i += 1
            if i >= size:
                return
            yield region[opening + 1:i]
            pos = i + 1

    @staticmethod
    def _unescape(raw: str) -> str:
        """Resolve ``\\(``, ``\\)``, ``\\\\``, ``\\n``; drop ``\\r``."""
        out = []
        i = 0
        size = len(raw)
        while i < size:
            ch = raw[i]
            if ch == "\\" and i + 1 < size:
                nxt = raw[i + 1]
                if nxt == "n":
                    out.append("\n")
                elif nxt == "r":
                    pass
                elif nxt in "()\\":
                    out.append(nxt)
                else:
                    out.append(ch + nxt)
                i += 2
                continue
            out.append(ch)
            i += 1
        return "".join(out)


class OfficeXMLSniffer(BaseSniffer):
    """Reads document properties from Office Open XML containers.

    By default the ZIP container is NOT decompressed: tag contents are
    matched against the raw archive bytes, so only parts stored without
    compression are seen. With ``decompress=True`` the core properties
    part and the Word body part are inflated first and searched before
    the raw bytes.
    """

    PROPERTY_TAGS = (
        ("title", re.compile(r"<dc:title>(.*?)</dc:title>"), TITLE_CAP),
        ("subject", re.compile(r"<dc:subject>(.*?)</dc:subject>"), SUBJECT_CAP),
        ("author", re.compile(r"<dc:creator>(.*?)</dc:creator>"), AUTHOR_CAP),
        ("description", re.compile(r"<dc:description>(.*?)</dc:description>"), DESCRIPTION_CAP),
        ("keywords", re.compile(r"<cp:keywords>(.*?)</cp:keywords>"), KEYWORDS_CAP),
    )
    # <w:t> and <w:t xml:space="preserve">, but not <w:tab/> or <w:tbl>
    RUN_TEXT = re.compile(r"<w:t(?:\s[^>]*)?>(.*?)</w:t>")
    CORE_PART = "docProps/core.xml"
    WORD_BODY_PART = "word/document.xml"

    def __init__(self, decompress: bool = False):
        """Initialize the sniffer.

        Args:
            decompress: Inflate XML parts via zipfile before scanning.
        """
        self.decompress = decompress

    @property
    def kind(self) -> FormatKind:
        return FormatKind.OFFICE_XML

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset({'.docx', '.xlsx', '.pptx'})

    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        text = to_binary_str(data)
        if self.decompress:
            inflated = self._inflate_parts(data, extension)
            if inflated:
                text = inflated + "\n" + text

        meta: ExtractedMetadata = {}
        for field_name, pattern, cap in self.PROPERTY_TAGS:
            match = pattern.search(text)
            if match:
                meta[field_name] = truncate(match.group(1), cap)

        if extension == '.docx':
            body = self._body_text(text)
            if body:
                meta["content"] = body

        return meta or None

    def _body_text(self, text: str) -> Optional[str]:
        """Concatenate Word run texts up to the content budget."""
        runs: List[str] = []
        joined_len = 0
        for match in self.RUN_TEXT.finditer(text):
            if joined_len >= CONTENT_CAP:
                break
            runs.append(match.group(1))
            joined_len += len(match.group(1)) + (1 if len(runs) > 1 else 0)

        body = truncate(" ".join(runs), CONTENT_CAP)
        return body if body.strip(ASCII_WHITESPACE) else None

    def _inflate_parts(self, data: bytes, extension: str) -> str:
        """Return the decompressed XML parts, or "" if not a readable ZIP."""
        parts = [self.CORE_PART]
        if extension == '.docx':
            parts.append(self.WORD_BODY_PART)

        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as e:
            logger.debug(f"Office container is not a readable ZIP: {e}")
            return ""

        texts = []
        with archive:
            for part in parts:
                try:
                    texts.append(archive.read(part).decode("utf-8", errors="replace"))
                except (KeyError, zipfile.BadZipFile, zlib.error, RuntimeError, EOFError) as e:
                    logger.debug(f"Could not inflate {part}: {e}")
        return "\n".join(texts)


class LegacyOfficeSniffer(BaseSniffer):
    """Salvages printable ASCII from legacy OLE Office files.

    No structural parsing: everything outside printable ASCII and LF
    becomes a space, long whitespace runs shrink, and the result is
    kept only if it is longer than a trivial fragment.
    """

    NON_PRINTABLE = re.compile(r"[^\x20-\x7E\n]")
    LONG_WHITESPACE = re.compile(r"\s{3,}")
    MIN_READABLE = 20

    @property
    def kind(self) -> FormatKind:
        return FormatKind.LEGACY_OFFICE

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset({'.doc', '.xls', '.ppt'})

    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        readable = self.NON_PRINTABLE.sub(" ", to_binary_str(data))
        readable = self.LONG_WHITESPACE.sub("  ", readable).strip()
        if len(readable) > self.MIN_READABLE:
            return {"content": truncate(readable, CONTENT_CAP)}
        return None
