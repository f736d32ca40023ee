"""
Image Sniffers
==============

Header-only extraction for JPEG and PNG files. Neither sniffer decodes
pixel data; both look at a small prefix of the file.
"""

import re
from typing import FrozenSet, Optional

from cleansweep.extraction.base import (
    BaseSniffer,
    CAMERA_CAP,
    ExtractedMetadata,
    FormatKind,
    truncate,
)
from cleansweep.extraction.binary_scanner import read_uint32_be, to_binary_str

# EXIF DateTime fields use "YYYY:MM:DD HH:MM:SS"
EXIF_DATETIME = re.compile(rb"(\d{4}):(\d{2}):(\d{2}) (\d{2}):(\d{2}):(\d{2})")

CAMERA_VENDORS = (
    "Canon", "Nikon", "Sony", "Apple", "Samsung", "Google", "Fujifilm",
    "Olympus", "Panasonic", "LG", "OnePlus", "Xiaomi", "Huawei", "OPPO",
    "iPhone", "Pixel",
)
CAMERA_TOKEN = re.compile(
    rb"(?:" + b"|".join(v.encode("ascii") for v in CAMERA_VENDORS) + rb")[^\x00]{0,40}",
    re.IGNORECASE,
)
NON_PRINTABLE = re.compile(r"[^\x20-\x7E]")

SCREENSHOT_MARKERS = (b"Screenshot", b"Snipping", b"ShareX")

PNG_MAGIC = b"\x89\x50"
PNG_WIDTH_OFFSET = 16
PNG_HEIGHT_OFFSET = 20
SCREEN_WIDTHS = frozenset({1920, 2560, 1440, 3840})
SCREEN_MIN_HEIGHT = 900


class JPEGSniffer(BaseSniffer):
    """Scans the EXIF area of a JPEG for date, camera and screenshot hints.

    Only the first 64 KiB are examined; APP1/EXIF data sits right after
    the SOI marker in practice.
    """

    read_limit = 64 * 1024

    @property
    def kind(self) -> FormatKind:
        return FormatKind.JPEG

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset({'.jpg', '.jpeg'})

    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        data = data[:self.read_limit]
        meta: ExtractedMetadata = {}

        date = EXIF_DATETIME.search(data)
        if date:
            y, mo, d, h, mi, s = (part.decode("ascii") for part in date.groups())
            meta["dateTaken"] = f"{y}-{mo}-{d} {h}:{mi}:{s}"

        camera = CAMERA_TOKEN.search(data)
        if camera:
            cleaned = NON_PRINTABLE.sub(" ", to_binary_str(camera.group(0))).strip()
            if cleaned:
                meta["camera"] = truncate(cleaned, CAMERA_CAP)

        if any(marker in data for marker in SCREENSHOT_MARKERS):
            meta["isScreenshot"] = True

        return meta or None


class PNGSniffer(BaseSniffer):
    """Reads image dimensions from the PNG IHDR chunk.

    Layout: 8-byte signature, 4-byte chunk length, ``IHDR``, then width
    and height as big-endian uint32 at offsets 16 and 20.
    """

    read_limit = 32

    @property
    def kind(self) -> FormatKind:
        return FormatKind.PNG

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset({'.png'})

    def sniff(self, data: bytes, extension: str) -> Optional[ExtractedMetadata]:
        if not data.startswith(PNG_MAGIC):
            return None

        width = read_uint32_be(data, PNG_WIDTH_OFFSET)
        height = read_uint32_be(data, PNG_HEIGHT_OFFSET)
        if width is None or height is None:
            return None

        meta: ExtractedMetadata = {"width": width, "height": height}
        if width in SCREEN_WIDTHS and height > SCREEN_MIN_HEIGHT:
            meta["likelyScreenshot"] = True
        return meta
