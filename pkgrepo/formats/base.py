"""Base classes for package control-data extractors.

Defines the packaging types pkgrepo understands, the interface every
control extractor implements, and the structured record produced for RPM
packages.
"""

import tempfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Union


class PackagingType(Enum):
    """Packaging format of an artifact."""

    DEB = "deb"
    RPM = "rpm"

    @property
    def extension(self) -> str:
        """File extension without the leading dot."""
        return self.value


class ExtractionError(RuntimeError):
    """Control data could not be extracted from a package."""


@dataclass
class RpmFile:
    """A file entry from an RPM header."""

    path: str  # Absolute path, e.g. "/usr/bin/foo"
    file_type: str = "-"  # d=directory, l=symlink, -=regular

    @property
    def is_directory(self) -> bool:
        """Check if entry is a directory."""
        return self.file_type == "d"

    @property
    def is_primary(self) -> bool:
        """Check if the file belongs in primary.xml.

        Package managers resolve file dependencies on these paths without
        downloading filelists.xml.
        """
        return (
            self.path.startswith("/etc/")
            or "bin/" in self.path
            or self.path == "/usr/lib/sendmail"
        )


@dataclass
class RpmDependency:
    """A provides/requires entry."""

    name: str
    flags: Optional[str] = None  # EQ, LT, GT, LE, GE
    epoch: Optional[str] = None
    version: Optional[str] = None
    release: Optional[str] = None
    pre: bool = False


@dataclass
class RpmChangelog:
    """One changelog entry."""

    author: str
    date: int  # UNIX epoch seconds
    text: str


@dataclass
class RpmRecord:
    """Structured RPM header fields needed by the RPM listings."""

    name: str
    version: str
    release: str
    arch: str
    epoch: int = 0
    summary: str = ""
    description: str = ""
    packager: str = ""
    url: str = ""
    license: str = ""
    vendor: str = ""
    group: str = ""
    buildhost: str = ""
    sourcerpm: str = ""
    build_time: int = 0
    installed_size: int = 0
    archive_size: int = 0
    files: List[RpmFile] = field(default_factory=list)
    provides: List[RpmDependency] = field(default_factory=list)
    requires: List[RpmDependency] = field(default_factory=list)
    changelogs: List[RpmChangelog] = field(default_factory=list)

    @property
    def primary_files(self) -> List[RpmFile]:
        """Files listed in primary.xml."""
        return [f for f in self.files if f.is_primary]


ControlRecord = Union[str, RpmRecord]


class ControlExtractor(ABC):
    """Abstract base class for control-data extractors.

    An extractor turns the raw bytes of one package into its control
    record: the control stanza text for Debian packages, an RpmRecord for
    RPM packages.
    """

    @property
    @abstractmethod
    def packaging_type(self) -> PackagingType:
        """Return the packaging type this extractor handles."""
        pass

    @abstractmethod
    def extract(self, data: bytes) -> ControlRecord:
        """Extract the control record from raw package bytes.

        Args:
            data: Raw package bytes

        Returns:
            Control record for the package

        Raises:
            ExtractionError: If extraction fails
        """
        pass

    @contextmanager
    def staged(self, data: bytes) -> Iterator[Path]:
        """Write package bytes to a temporary file for the external tools.

        Args:
            data: Raw package bytes

        Yields:
            Path of the temporary package file
        """
        suffix = f".{self.packaging_type.extension}"
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / f"package{suffix}"
            path.write_bytes(data)
            yield path
