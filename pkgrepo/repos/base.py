"""Base classes for repository index generators.

Holds the digest/size records embedded in summary documents, the template
rendering glue shared by all generators, and the generator interface.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from ..common.compression import zstd_compress
from ..common.digest import DigestAlgorithm, all_digests, digest
from ..formats.base import PackagingType
from ..package import Package
from .templates import TEMPLATES

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Anything outside the XML 1.0 Char production
XML_INVALID_CHARS = re.compile(
    r"[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def xml_text(value: Any) -> str:
    """Drop characters that may not appear in an XML 1.0 document.

    Header text such as descriptions and changelogs can carry terminal
    escapes or form feeds; left in place they make the whole listing
    unparsable.
    """
    return XML_INVALID_CHARS.sub("", str(value))


_environment = Environment(
    loader=DictLoader(TEMPLATES),
    undefined=StrictUndefined,
    autoescape=select_autoescape(enabled_extensions=("xml",), default_for_string=False),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
_environment.filters["xml_text"] = xml_text


def render(document: str, **fields: Any) -> str:
    """Render a document skeleton.

    Fields are always generator-built, so a rendering error is a bug and
    propagates.

    Args:
        document: Template name (e.g. "Release", "primary.xml")
        **fields: Template fields

    Returns:
        Rendered document text
    """
    return _environment.get_template(document).render(**fields)


@dataclass
class FileEntry:
    """Size and digests of one file listed in a Release document."""

    path: str
    size: int
    md5: str
    sha1: str
    sha256: str
    sha512: str

    @classmethod
    def from_bytes(cls, path: str, data: bytes) -> "FileEntry":
        """Build an entry from file contents.

        Args:
            path: Path relative to the Release file
            data: File contents

        Returns:
            FileEntry instance
        """
        digests = all_digests(data)
        return cls(
            path=path,
            size=len(data),
            md5=digests[DigestAlgorithm.MD5],
            sha1=digests[DigestAlgorithm.SHA1],
            sha256=digests[DigestAlgorithm.SHA256],
            sha512=digests[DigestAlgorithm.SHA512],
        )


@dataclass
class ListingMetadata:
    """Plain and compressed checksum/size of one RPM listing."""

    data_type: str
    location: str
    sha256: str
    open_sha256: str
    size: int
    open_size: int
    compressed: bytes

    @classmethod
    def create(cls, data_type: str, content: str, level: int) -> "ListingMetadata":
        """Compress a listing and record its digests.

        Args:
            data_type: Listing type ("primary", "filelists", "other")
            content: Listing text
            level: zstd compression level

        Returns:
            ListingMetadata instance
        """
        data = content.encode("utf-8")
        compressed = zstd_compress(data, level)
        return cls(
            data_type=data_type,
            location=f"repodata/{data_type}.xml.zst",
            sha256=digest(DigestAlgorithm.SHA256, compressed),
            open_sha256=digest(DigestAlgorithm.SHA256, data),
            size=len(compressed),
            open_size=len(data),
            compressed=compressed,
        )


def latest_creation(packages: Iterable[Package]) -> datetime:
    """Latest creation time of a set of packages.

    Args:
        packages: Packages to scan

    Returns:
        Maximum ``created_at``, or the UNIX epoch if there are none
    """
    return max((p.created_at for p in packages), default=UNIX_EPOCH)


class IndexGenerator(ABC):
    """Abstract base class for index generators.

    A generator is built from a package pool and produces the documents of
    one repository flavour as bytes keyed by repository-relative path.
    """

    @property
    @abstractmethod
    def generator_name(self) -> str:
        """Return the generator identifier (e.g., 'apt', 'rpm')."""
        pass

    @property
    @abstractmethod
    def packaging_type(self) -> PackagingType:
        """Return the packaging type the generator indexes."""
        pass

    @property
    @abstractmethod
    def package_count(self) -> int:
        """Return the number of packages that made it into the index."""
        pass

    @abstractmethod
    def build(self) -> Dict[str, bytes]:
        """Generate every document of the repository.

        Returns:
            Mapping of repository-relative path to document bytes
        """
        pass
