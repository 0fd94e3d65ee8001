"""APT repository index generator.

Builds the ``Packages`` listing and the ``Release`` summary for a flat
single-component repository whose artifacts live under the pool path.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, List, Optional, Sequence

from ..common.compression import gzip_deterministic
from ..common.config import IndexConfig
from ..common.digest import DigestAlgorithm, all_digests
from ..common.logger import get_logger
from ..formats.base import ControlExtractor, ExtractionError, PackagingType
from ..formats.registry import get_extractor
from ..package import Arch, MissingRawDataError, Package
from .base import FileEntry, IndexGenerator, latest_creation, render

logger = get_logger("repo.apt")


@dataclass
class PackageStanza:
    """Fields of one ``Packages`` stanza."""

    control: str
    filename: str
    size: int
    md5: str
    sha1: str
    sha256: str
    sha512: str


class AptIndices(IndexGenerator):
    """Generator for APT repository metadata.

    Control data is extracted once at construction time. Packages whose
    data is not downloaded yet, or whose control data cannot be read, are
    logged and left out of the index.
    """

    def __init__(
        self,
        packages: Sequence[Package],
        config: Optional[IndexConfig] = None,
        extractor: Optional[ControlExtractor] = None,
    ):
        """Initialize generator.

        Args:
            packages: Packages to index, in output order
            config: Repository configuration
            extractor: Control extractor; defaults to the registered
                Debian extractor

        Raises:
            ValueError: If the configured architecture is not supported
        """
        self.config = config or IndexConfig()
        self.architecture = Arch.parse(self.config.apt.architecture)
        if self.architecture is None:
            raise ValueError(
                f"Unsupported architecture: {self.config.apt.architecture}"
            )
        self.extractor = extractor or get_extractor(
            PackagingType.DEB, timeout=self.config.extractor.timeout
        )
        self.date = latest_creation(packages)
        self.stanzas: List[PackageStanza] = []

        for package in packages:
            stanza = self._build_stanza(package)
            if stanza is not None:
                self.stanzas.append(stanza)

    @property
    def generator_name(self) -> str:
        """Return generator identifier."""
        return "apt"

    @property
    def packaging_type(self) -> PackagingType:
        """Return packaging type."""
        return PackagingType.DEB

    @property
    def package_count(self) -> int:
        """Return the number of indexed packages."""
        return len(self.stanzas)

    @property
    def binary_dir(self) -> str:
        """Directory of the listings relative to the Release file."""
        return f"{self.config.apt.component}/binary-{self.architecture.value}"

    def _build_stanza(self, package: Package) -> Optional[PackageStanza]:
        """Extract control data and digests for one package.

        Args:
            package: Package to describe

        Returns:
            PackageStanza, or None if the package is skipped
        """
        try:
            data = package.require_data()
        except MissingRawDataError:
            logger.warning(f"Skipping {package.download_url}: package data not downloaded")
            return None

        try:
            control = self.extractor.extract(data)
        except ExtractionError as e:
            logger.error(f"Error occurred when extracting debian control data: {e}")
            return None

        digests = all_digests(data)
        return PackageStanza(
            control=str(control).rstrip(),
            filename=package.pool_path(self.config.pool_prefix),
            size=len(data),
            md5=digests[DigestAlgorithm.MD5],
            sha1=digests[DigestAlgorithm.SHA1],
            sha256=digests[DigestAlgorithm.SHA256],
            sha512=digests[DigestAlgorithm.SHA512],
        )

    def get_package_index(self) -> str:
        """Render the ``Packages`` listing.

        Returns:
            Stanzas in input order, right-trimmed
        """
        return render("Packages", stanzas=self.stanzas).rstrip()

    def get_release_index(self) -> str:
        """Render the ``Release`` summary.

        Returns:
            Release document describing the plain and gzip listings
        """
        packages = self.get_package_index().encode("utf-8")
        packages_gz = gzip_deterministic(packages)

        files = [
            FileEntry.from_bytes(f"{self.binary_dir}/Packages", packages),
            FileEntry.from_bytes(f"{self.binary_dir}/Packages.gz", packages_gz),
        ]

        apt = self.config.apt
        return render(
            "Release",
            origin=apt.origin,
            label=apt.label,
            suite=apt.suite,
            codename=apt.codename,
            date=format_release_date(self.date),
            architecture=self.architecture.value,
            component=apt.component,
            description=apt.description,
            files=files,
        )

    def build(self) -> Dict[str, bytes]:
        """Generate the Release file and both Packages listings.

        Returns:
            Mapping of repository-relative path to document bytes
        """
        packages = self.get_package_index().encode("utf-8")
        return {
            "Release": self.get_release_index().encode("utf-8"),
            f"{self.binary_dir}/Packages": packages,
            f"{self.binary_dir}/Packages.gz": gzip_deterministic(packages),
        }


def format_release_date(date: datetime) -> str:
    """Format a timestamp as an RFC 2822 date in UTC."""
    return format_datetime(date.astimezone(timezone.utc))


def package_index(
    packages: Sequence[Package],
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> str:
    """Render the ``Packages`` listing for a set of packages."""
    return AptIndices(packages, config, extractor).get_package_index()


def release_index(
    packages: Sequence[Package],
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> str:
    """Render the ``Release`` summary for a set of packages."""
    return AptIndices(packages, config, extractor).get_release_index()
