"""RPM repository index generator.

Builds the ``primary``, ``filelists`` and ``other`` listings and the
``repomd.xml`` summary that dnf/yum/zypper read from ``repodata/``.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..common.config import IndexConfig
from ..common.digest import DigestAlgorithm, digest
from ..common.logger import get_logger
from ..formats.base import ControlExtractor, ExtractionError, PackagingType, RpmRecord
from ..formats.registry import get_extractor
from ..package import MissingRawDataError, Package
from .base import IndexGenerator, ListingMetadata, render

logger = get_logger("repo.rpm")


@dataclass
class RpmEntry:
    """One package as it appears in the RPM listings."""

    record: RpmRecord
    sha256: str  # Also the pkgid
    size: int
    location: str
    file_time: int  # Package time, UNIX epoch seconds


class RpmIndices(IndexGenerator):
    """Generator for RPM repository metadata.

    Header data is extracted once at construction time. Packages whose
    data is not downloaded yet, or whose header cannot be read, are logged
    and left out of the listings.
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
            extractor: Header extractor; defaults to the registered RPM
                extractor
        """
        self.config = config or IndexConfig()
        self.extractor = extractor or get_extractor(
            PackagingType.RPM, timeout=self.config.extractor.timeout
        )
        self.entries: List[RpmEntry] = []

        for package in packages:
            entry = self._build_entry(package)
            if entry is not None:
                self.entries.append(entry)

    @property
    def generator_name(self) -> str:
        """Return generator identifier."""
        return "rpm"

    @property
    def packaging_type(self) -> PackagingType:
        """Return packaging type."""
        return PackagingType.RPM

    @property
    def package_count(self) -> int:
        """Return the number of indexed packages."""
        return len(self.entries)

    @property
    def timestamp(self) -> int:
        """Latest package time of the indexed packages, 0 if there are none."""
        return max((entry.file_time for entry in self.entries), default=0)

    def _build_entry(self, package: Package) -> Optional[RpmEntry]:
        """Extract header data and digest for one package.

        Args:
            package: Package to describe

        Returns:
            RpmEntry, or None if the package is skipped
        """
        try:
            data = package.require_data()
        except MissingRawDataError:
            logger.warning(f"Skipping {package.download_url}: package data not downloaded")
            return None

        try:
            record = self.extractor.extract(data)
        except ExtractionError as e:
            logger.error(f"Error occurred when extracting rpm header data: {e}")
            return None

        if not isinstance(record, RpmRecord):
            raise TypeError(f"RPM extractor returned {type(record).__name__}, expected RpmRecord")

        return RpmEntry(
            record=record,
            sha256=digest(DigestAlgorithm.SHA256, data),
            size=len(data),
            location=package.pool_path(self.config.pool_prefix),
            file_time=int(package.created_at.timestamp()),
        )

    def get_primary_index(self) -> str:
        """Render ``primary.xml``."""
        return render("primary.xml", packages=self.entries)

    def get_filelists_index(self) -> str:
        """Render ``filelists.xml``."""
        return render("filelists.xml", packages=self.entries)

    def get_other_index(self) -> str:
        """Render ``other.xml``."""
        return render("other.xml", packages=self.entries)

    def get_listing_metadata(self) -> List[ListingMetadata]:
        """Compress each listing and record its checksums and sizes.

        Returns:
            ListingMetadata for primary, filelists and other, in that order
        """
        level = self.config.rpm.zstd_level
        return [
            ListingMetadata.create("primary", self.get_primary_index(), level),
            ListingMetadata.create("filelists", self.get_filelists_index(), level),
            ListingMetadata.create("other", self.get_other_index(), level),
        ]

    def get_repomd_index(self) -> str:
        """Render ``repomd.xml``."""
        return self._render_repomd(self.get_listing_metadata())

    def _render_repomd(self, listings: List[ListingMetadata]) -> str:
        return render("repomd.xml", entries=listings, timestamp=self.timestamp)

    def build(self) -> Dict[str, bytes]:
        """Generate repomd.xml and the compressed listings.

        Returns:
            Mapping of repository-relative path to document bytes
        """
        listings = self.get_listing_metadata()
        documents = {"repodata/repomd.xml": self._render_repomd(listings).encode("utf-8")}
        for listing in listings:
            documents[listing.location] = listing.compressed
        return documents


def primary_index(
    packages: Sequence[Package],
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> str:
    """Render ``primary.xml`` for a set of packages."""
    return RpmIndices(packages, config, extractor).get_primary_index()


def filelists_index(
    packages: Sequence[Package],
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> str:
    """Render ``filelists.xml`` for a set of packages."""
    return RpmIndices(packages, config, extractor).get_filelists_index()


def other_index(
    packages: Sequence[Package],
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> str:
    """Render ``other.xml`` for a set of packages."""
    return RpmIndices(packages, config, extractor).get_other_index()


def repomd_index(
    packages: Sequence[Package],
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> str:
    """Render ``repomd.xml`` for a set of packages."""
    return RpmIndices(packages, config, extractor).get_repomd_index()
