"""Debian package (.deb) control extractor.

Reads the control stanza of a Debian package with dpkg-deb.
"""

import subprocess

from ..common.logger import get_logger
from .base import ControlExtractor, ExtractionError, PackagingType

logger = get_logger("format.deb")

AR_MAGIC = b"!<arch>"


class DebControlExtractor(ControlExtractor):
    """Extractor for Debian packages (.deb files).

    Debian packages are ar archives containing:
    - debian-binary: Version information
    - control.tar.gz/xz: Control files and maintainer scripts
    - data.tar.gz/xz/zst: Package contents
    """

    def __init__(self, timeout: int = 30):
        """Initialize extractor.

        Args:
            timeout: dpkg-deb timeout in seconds
        """
        self.timeout = timeout

    @property
    def packaging_type(self) -> PackagingType:
        """Return packaging type."""
        return PackagingType.DEB

    def extract(self, data: bytes) -> str:
        """Return the control stanza of a Debian package.

        The text is kept byte-for-byte as dpkg-deb prints it, minus
        trailing whitespace.

        Args:
            data: Raw .deb bytes

        Returns:
            Control stanza text

        Raises:
            ExtractionError: If the data is not a Debian package or
                dpkg-deb fails
        """
        if not data.startswith(AR_MAGIC):
            raise ExtractionError("Invalid package header (not ar archive)")

        with self.staged(data) as path:
            try:
                result = subprocess.run(
                    ["dpkg-deb", "-f", str(path)],
                    capture_output=True,
                    check=True,
                    timeout=self.timeout,
                )
            except subprocess.CalledProcessError as e:
                stderr = e.stderr.decode() if e.stderr else str(e)
                raise ExtractionError(f"Failed to read control file: {stderr}") from e
            except subprocess.TimeoutExpired as e:
                raise ExtractionError("Control extraction timed out") from e
            except FileNotFoundError as e:
                raise ExtractionError("dpkg-deb command not found. Install dpkg.") from e

        control = result.stdout.decode("utf-8", errors="replace").rstrip()
        if not control:
            raise ExtractionError("Package has an empty control file")

        logger.debug(f"Extracted control data ({len(control)} bytes)")
        return control
