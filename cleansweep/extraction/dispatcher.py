"""
Extraction Dispatcher
=====================

Maps a file's extension to its sniffer, performs the bounded read the
sniffer asks for, and converts every failure into an ``error`` field so
one bad file never aborts a folder scan.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from cleansweep.config.settings import ExtractionConfig
from cleansweep.extraction.base import BaseSniffer, ExtractedMetadata, FormatKind
from cleansweep.extraction.binary_scanner import read_all, read_range
from cleansweep.extraction.document_sniffers import (
    LegacyOfficeSniffer,
    OfficeXMLSniffer,
    PDFSniffer,
)
from cleansweep.extraction.image_sniffers import JPEGSniffer, PNGSniffer
from cleansweep.extraction.text_sniffer import PlainTextSniffer
from cleansweep.utils.exceptions import ErrorCode, ExtractionError
from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)


class MetadataExtractor:
    """Extension-driven front end to the format sniffers.

    Holds no mutable state after construction, so one instance can be
    shared between threads.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """Initialize the extractor.

        Args:
            config: Extraction settings. Uses defaults if not provided.
        """
        self.config = config or ExtractionConfig()
        self.sniffers: Dict[FormatKind, BaseSniffer] = {
            FormatKind.PDF: PDFSniffer(),
            FormatKind.OFFICE_XML: OfficeXMLSniffer(decompress=self.config.decompress_office),
            FormatKind.LEGACY_OFFICE: LegacyOfficeSniffer(),
            FormatKind.JPEG: JPEGSniffer(),
            FormatKind.PNG: PNGSniffer(),
            FormatKind.PLAIN_TEXT: PlainTextSniffer(),
        }
        self._by_extension: Dict[str, BaseSniffer] = {
            ext: sniffer
            for sniffer in self.sniffers.values()
            for ext in sniffer.supported_extensions
        }

    @property
    def supported_extensions(self) -> List[str]:
        """All extensions with a sniffer, sorted."""
        return sorted(self._by_extension)

    def sniffer_for(self, extension: str) -> Optional[BaseSniffer]:
        """Look up the sniffer for an extension (case-insensitive)."""
        return self._by_extension.get(extension.lower())

    def supports(self, file_path: Union[str, Path]) -> bool:
        """Check if a sniffer exists for the file's extension."""
        return self.sniffer_for(Path(file_path).suffix) is not None

    def extract(
        self,
        file_path: Union[str, Path],
        extension: Optional[str] = None
    ) -> ExtractedMetadata:
        """Extract metadata from a file.

        Args:
            file_path: Absolute path of the file.
            extension: Lower-cased extension; derived from the path if omitted.

        Returns:
            Extracted fields, ``{}`` for unrecognized types or when nothing
            was found, or ``{"error": message}`` when extraction failed.
        """
        file_path = Path(file_path)
        ext = (extension if extension is not None else file_path.suffix).lower()

        sniffer = self.sniffer_for(ext)
        if sniffer is None:
            return {}

        try:
            data = self._read(file_path, sniffer)
            if data is None:
                raise ExtractionError(
                    "File could not be read",
                    file_path=str(file_path),
                    sniffer=sniffer.kind.value,
                    error_code=ErrorCode.UNREADABLE_FILE
                )
            meta = sniffer.sniff(data, ext)
        except ExtractionError as e:
            logger.warning(
                f"Extraction failed for {file_path.name}: {e.message}",
                extra={
                    "file_path": str(file_path),
                    "sniffer": e.details.get("sniffer"),
                    "error_code": e.error_code.name,
                }
            )
            return {"error": e.message}
        except Exception as e:
            logger.warning(
                f"Extraction failed for {file_path.name}: {e}",
                extra={"file_path": str(file_path)}
            )
            return {"error": str(e) or type(e).__name__}

        return dict(meta) if meta else {}

    def _read(self, file_path: Path, sniffer: BaseSniffer) -> Optional[bytes]:
        """Perform the read a sniffer needs."""
        if sniffer.read_limit is not None:
            return read_range(file_path, 0, sniffer.read_limit)

        cap = self.config.max_full_read_bytes
        if cap:
            logger.debug(f"Reading at most {cap} bytes of {file_path.name}")
        return read_all(file_path, limit=cap)


_default_extractor = MetadataExtractor()


def extract(
    file_path: Union[str, Path],
    extension: Optional[str] = None
) -> ExtractedMetadata:
    """Extract metadata with default settings.

    See ``MetadataExtractor.extract``.
    """
    return _default_extractor.extract(file_path, extension)
