"""
Sniffer Base Types
==================

Shared types for the format sniffers: the closed set of format kinds,
the metadata mapping they return, and the abstract sniffer interface.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

MetadataValue = Union[str, int, bool]
ExtractedMetadata = Dict[str, MetadataValue]

# Per-field length caps applied before a sniffer returns
CONTENT_CAP = 1500
PDF_CONTENT_CAP = 2000
TITLE_CAP = 200
SUBJECT_CAP = 200
AUTHOR_CAP = 100
DESCRIPTION_CAP = 300
KEYWORDS_CAP = 200
CAMERA_CAP = 60


class FormatKind(Enum):
    """Format families with a dedicated sniffer."""
    PDF = "pdf"
    OFFICE_XML = "office_xml"
    LEGACY_OFFICE = "legacy_office"
    JPEG = "jpeg"
    PNG = "png"
    PLAIN_TEXT = "plain_text"


class BaseSniffer(ABC):
    """Abstract base class for format sniffers.

    A sniffer is a pure function of a byte buffer. It never touches the
    filesystem itself; the dispatcher performs the read described by
    ``read_limit`` and hands over the bytes.
    """

    #: Bytes needed from the start of the file. None means the whole file.
    read_limit: Optional[int] = None

    @property
    @abstractmethod
    def kind(self) -> FormatKind:
        """Format family handled by this sniffer."""

    @property
    @abstractmethod
    def supported_extensions(self) -> FrozenSet[str]:
        """Lower-cased extensions, including the dot."""

    @abstractmethod
    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        """Extract metadata from ``data``.

        Args:
            data: Bytes read from the start of the file.
            extension: Lower-cased extension including the dot.

        Returns:
            Extracted fields, or None when nothing usable was found.
        """

    def supports(self, extension: str) -> bool:
        """Check if this sniffer handles the extension."""
        return extension.lower() in self.supported_extensions


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters."""
    return text[:limit]
