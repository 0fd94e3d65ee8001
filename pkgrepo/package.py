"""Package classification.

A Package is one distributable artifact. Its packaging type and target
distribution are derived from the filename once, at construction time;
only the raw-data slot changes afterwards, when the artifact is fetched.
"""

import re
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

import httpx
from packaging.version import InvalidVersion, Version

from .common.config import DEFAULT_POOL_PREFIX
from .common.logger import get_logger
from .formats.base import PackagingType

logger = get_logger("package")

TOKEN_SEPARATORS = re.compile(r"[-_]")


class ClassificationError(ValueError):
    """Filename does not carry a recognized packaging extension."""


class MissingRawDataError(LookupError):
    """Package data was requested before it was downloaded."""


class FetchError(RuntimeError):
    """Package data could not be downloaded."""


class DistFamily(Enum):
    """Distribution lineage, independent of version."""

    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    FEDORA = "fedora"

    @property
    def packaging_type(self) -> PackagingType:
        """Packaging type the family installs."""
        if self is DistFamily.FEDORA:
            return PackagingType.RPM
        return PackagingType.DEB

    @property
    def version_sensitive(self) -> bool:
        """Whether selection prefers an exact version match.

        Debian deliberately selects on family alone.
        """
        return self in (DistFamily.UBUNTU, DistFamily.FEDORA)


@dataclass(frozen=True)
class Dist:
    """A distribution family with an optional parsed version.

    Two values are equal only if family and version both match, so
    ``Dist(UBUNTU)`` differs from ``Dist(UBUNTU, Version("22.04"))``.
    """

    family: DistFamily
    version: Optional[Version] = None

    @classmethod
    def of(cls, family: DistFamily, version: Optional[str] = None) -> "Dist":
        """Build a Dist from a family and a version string.

        Args:
            family: Distribution family
            version: Version string such as "22.04"; unparsable strings
                yield no version

        Returns:
            Dist instance
        """
        return cls(family, _parse(version) if version else None)

    def __str__(self) -> str:
        if self.version is None:
            return self.family.value
        return f"{self.family.value}{self.version}"


class Arch(Enum):
    """Supported binary architectures."""

    AMD64 = "amd64"

    @classmethod
    def parse(cls, value: str) -> Optional["Arch"]:
        """Parse an architecture name, returning None if unsupported."""
        try:
            return cls(value)
        except ValueError:
            return None


class Package:
    """One distributable artifact.

    Everything but the raw data is immutable. The raw data starts empty
    and is populated by :meth:`set_data` (or :meth:`download`); the slot
    is guarded by a lock so readers always see either nothing or a whole
    buffer.
    """

    def __init__(
        self,
        packaging_type: PackagingType,
        distribution: Optional[Dist],
        declared_version: str,
        download_url: str,
        created_at: datetime,
    ):
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        self._packaging_type = packaging_type
        self._distribution = distribution
        self._declared_version = declared_version
        self._download_url = download_url
        self._created_at = created_at
        self._data: Optional[bytes] = None
        self._lock = threading.Lock()

    @property
    def packaging_type(self) -> PackagingType:
        return self._packaging_type

    @property
    def distribution(self) -> Optional[Dist]:
        return self._distribution

    @property
    def declared_version(self) -> str:
        return self._declared_version

    @property
    def download_url(self) -> str:
        return self._download_url

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def is_deb(self) -> bool:
        return self._packaging_type is PackagingType.DEB

    @property
    def file_name(self) -> str:
        """Basename of the artifact, taken from the URL's last path segment.

        Raises:
            ValueError: If the URL has no final path segment
        """
        name = self._download_url.split("/")[-1]
        if not name:
            raise ValueError(f"URL has no file name: {self._download_url!r}")
        return name

    def pool_path(self, prefix: str = DEFAULT_POOL_PREFIX) -> str:
        """Repository-relative path of the artifact.

        Args:
            prefix: Pool directory

        Returns:
            Path of the form ``{prefix}/{declared_version}/{file_name}``
        """
        return f"{prefix}/{self._declared_version}/{self.file_name}"

    def set_data(self, data: bytes) -> None:
        """Populate the raw-data slot.

        Args:
            data: Raw package bytes
        """
        data = bytes(data)
        with self._lock:
            self._data = data

    def data(self) -> Optional[bytes]:
        """Return the raw data, or None if it was not downloaded yet."""
        with self._lock:
            return self._data

    @property
    def has_data(self) -> bool:
        return self.data() is not None

    def require_data(self) -> bytes:
        """Return the raw data.

        Raises:
            MissingRawDataError: If the package was not downloaded yet
        """
        data = self.data()
        if data is None:
            raise MissingRawDataError(f"Package data not available: {self._download_url}")
        return data

    async def download(self, client: httpx.AsyncClient) -> None:
        """Download the package and populate the raw-data slot.

        Args:
            client: HTTP client to fetch with

        Raises:
            FetchError: If the request fails or returns an error status
        """
        try:
            response = await client.get(self._download_url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to download {self._download_url}: {e}") from e

        self.set_data(response.content)
        logger.debug(f"Downloaded {self.file_name} ({len(response.content)} bytes)")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return (
            self._packaging_type == other._packaging_type
            and self._distribution == other._distribution
            and self._download_url == other._download_url
            and self._declared_version == other._declared_version
            and self._created_at == other._created_at
            and self.data() == other.data()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Package(type={self._packaging_type.value}, dist={self._distribution}, "
            f"version={self._declared_version!r}, url={self._download_url!r})"
        )


def classify(
    filename: str,
    declared_version: str,
    url: str,
    created_at: datetime,
) -> Package:
    """Classify an artifact by its filename.

    Args:
        filename: Artifact filename, e.g. ``foo_1.0-ubuntu22.04.deb``
        declared_version: Release version the artifact was published under
        url: Download URL
        created_at: Publication time

    Returns:
        Package instance

    Raises:
        ClassificationError: If the extension is neither deb nor rpm
    """
    split = split_extension(filename)
    if split is None:
        raise ClassificationError(f"Unrecognized package extension: {filename}")

    packaging_type, stem = split
    return Package(
        packaging_type=packaging_type,
        distribution=detect_distribution(stem),
        declared_version=declared_version,
        download_url=url,
        created_at=created_at,
    )


def split_extension(filename: str) -> Optional[Tuple[PackagingType, str]]:
    """Split a filename into its packaging type and stem.

    Args:
        filename: Artifact filename

    Returns:
        Tuple of (packaging_type, stem), or None when the final suffix is
        not a packaging extension or there is no stem before it
    """
    index = filename.rfind(".")
    if index <= 0:
        return None

    extension = filename[index + 1:]
    for packaging_type in PackagingType:
        if extension == packaging_type.extension:
            return packaging_type, filename[:index]
    return None


def detect_distribution(stem: str) -> Optional[Dist]:
    """Detect the target distribution from a filename stem.

    The stem is split on ``-`` and ``_``; the first token that names a
    known family decides the distribution.

    Args:
        stem: Filename without its packaging extension

    Returns:
        Dist or None if no token names a distribution
    """
    tokens: List[str] = TOKEN_SEPARATORS.split(stem)
    for token in tokens:
        for family in DistFamily:
            if family.value in token:
                return Dist(family, parse_dist_version(token))
    return None


def parse_dist_version(token: str) -> Optional[Version]:
    """Parse the version from a distribution token.

    ``ubuntu22.10`` parses as 22.10 and ``fedora37`` as 37.

    Args:
        token: Distribution token

    Returns:
        Parsed version or None
    """
    raw = split_at_numeric(token)
    if raw is None:
        return None
    return _parse(raw)


def split_at_numeric(s: str) -> Optional[str]:
    """Return the tail of ``s`` starting at the first letter-to-digit boundary.

    For ``ubuntu24.10`` this is ``24.10``; ``ubuntu`` has no boundary.
    """
    for index in range(1, len(s)):
        prev, curr = s[index - 1], s[index]
        if prev.isascii() and prev.isalpha() and curr.isascii() and curr.isdigit():
            return s[index:]
    return None


def _parse(raw: str) -> Optional[Version]:
    try:
        return Version(raw)
    except InvalidVersion:
        return None
