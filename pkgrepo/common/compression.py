"""Deterministic compressors for repository listings.

Compressed listings are checksummed inside Release and repomd.xml, so the
output must depend on the input bytes only.
"""

import gzip
import io

import zstandard


def gzip_deterministic(data: bytes, compresslevel: int = 9) -> bytes:
    """Gzip-compress with a zeroed modification time and no file name.

    Args:
        data: Bytes to compress
        compresslevel: zlib compression level

    Returns:
        Gzip stream
    """
    buffer = io.BytesIO()
    with gzip.GzipFile(
        filename="", mode="wb", compresslevel=compresslevel, fileobj=buffer, mtime=0
    ) as gz:
        gz.write(data)
    return buffer.getvalue()


def zstd_compress(data: bytes, level: int = 3) -> bytes:
    """Compress with zstd at a fixed level.

    Args:
        data: Bytes to compress
        level: zstd compression level

    Returns:
        Single zstd frame with the content size recorded
    """
    compressor = zstandard.ZstdCompressor(level=level, write_content_size=True)
    return compressor.compress(data)
