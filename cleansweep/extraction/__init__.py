"""Content-sniffing metadata extraction."""

from .base import BaseSniffer, ExtractedMetadata, FormatKind
from .dispatcher import MetadataExtractor, extract
from .document_sniffers import PDFSniffer, OfficeXMLSniffer, LegacyOfficeSniffer
from .image_sniffers import JPEGSniffer, PNGSniffer
from .text_sniffer import PlainTextSniffer

__all__ = [
    "BaseSniffer",
    "ExtractedMetadata",
    "FormatKind",
    "MetadataExtractor",
    "extract",
    "PDFSniffer",
    "OfficeXMLSniffer",
    "LegacyOfficeSniffer",
    "JPEGSniffer",
    "PNGSniffer",
    "PlainTextSniffer",
]
