"""
Binary Scanner
==============

Low-level primitives shared by the format sniffers: bounded reads,
a binary-safe string view, and big-endian integer decoding.

Reads never raise on I/O errors. They return None and leave it to the
caller to decide whether the failure becomes an ``error`` field.
"""

from pathlib import Path
from typing import Iterator, Optional, Union

from cleansweep.utils.logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

# latin-1 maps every byte 0x00-0xFF to exactly one code point
BINARY_SAFE_ENCODING = "latin-1"


def read_range(path: PathLike, offset: int, length: int) -> Optional[bytes]:
    """Read the byte range [offset, offset + length) of a file.

    The result is shorter than ``length`` when the file ends first.

    Args:
        path: File to read.
        offset: Start offset in bytes.
        length: Number of bytes wanted.

    Returns:
        The bytes read, or None if the file could not be read.
    """
    if offset < 0 or length < 0:
        raise ValueError("offset and length must be non-negative")
    try:
        with open(path, 'rb') as f:
            f.seek(offset)
            return f.read(length)
    except OSError as e:
        logger.debug(f"Bounded read failed for {path}: {e}")
        return None


def read_all(path: PathLike, limit: Optional[int] = None) -> Optional[bytes]:
    """Read a whole file, optionally stopping after ``limit`` bytes.

    Args:
        path: File to read.
        limit: Maximum number of bytes to return. None reads everything.

    Returns:
        File contents, or None if the file could not be read.
    """
    if limit is not None:
        return read_range(path, 0, limit)
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        logger.debug(f"Full read failed for {path}: {e}")
        return None


def to_binary_str(data: bytes) -> str:
    """Decode bytes so that each byte becomes one character.

    Pattern matching against ASCII markers on the result never fails and
    never merges or drops bytes >= 0x80.
    """
    return data.decode(BINARY_SAFE_ENCODING)


def read_uint32_be(data: bytes, offset: int) -> Optional[int]:
    """Decode a big-endian unsigned 32-bit integer at ``offset``.

    Returns:
        The integer, or None when fewer than four bytes are available.
    """
    if offset < 0 or offset + 4 > len(data):
        return None
    return int.from_bytes(data[offset:offset + 4], "big")


def find_all(data: bytes, needle: bytes, start: int = 0) -> Iterator[int]:
    """Yield offsets of non-overlapping occurrences of ``needle``."""
    if not needle:
        return
    pos = data.find(needle, start)
    while pos != -1:
        yield pos
        pos = data.find(needle, pos + len(needle))
