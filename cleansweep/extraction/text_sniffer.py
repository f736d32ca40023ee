"""Plain-text and source-code fallback sniffer."""

from typing import FrozenSet, Optional

from cleansweep.extraction.base import BaseSniffer, ExtractedMetadata, FormatKind

TEXT_EXTENSIONS = frozenset({
    '.txt', '.md', '.csv', '.json', '.js', '.ts', '.py', '.html', '.css',
    '.java', '.c', '.cpp', '.h', '.rb', '.go', '.rs', '.sh', '.bat', '.ps1',
    '.xml', '.yaml', '.yml', '.ini', '.cfg', '.conf', '.log', '.sql', '.r',
    '.rtf',
})


class PlainTextSniffer(BaseSniffer):
    """Returns the first 1500 bytes of a text file as ``content``.

    Invalid UTF-8 becomes U+FFFD and NUL bytes are removed; nothing else
    is altered.
    """

    read_limit = 1500

    @property
    def kind(self) -> FormatKind:
        return FormatKind.PLAIN_TEXT

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return TEXT_EXTENSIONS

    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        text = data[:self.read_limit].decode("utf-8", errors="replace").replace("\x00", "")
        if not text:
            return None
        return {"content": text}
