"""RPM package control extractor.

Queries an RPM header with the rpm tool and returns the fields the RPM
repository listings need.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from ..common.logger import get_logger
from .base import (
    ControlExtractor,
    ExtractionError,
    PackagingType,
    RpmChangelog,
    RpmDependency,
    RpmFile,
    RpmRecord,
)

logger = get_logger("format.rpm")

RPM_MAGIC = b"\xed\xab\xee\xdb"

# Header fields queried in one call, one per line
HEADER_TAGS = [
    "NAME",
    "EPOCH",
    "VERSION",
    "RELEASE",
    "ARCH",
    "SUMMARY",
    "PACKAGER",
    "URL",
    "LICENSE",
    "VENDOR",
    "GROUP",
    "BUILDHOST",
    "SOURCERPM",
    "BUILDTIME",
    "SIZE",
    "ARCHIVESIZE",
]

DEPENDENCY_QUERY = (
    "[P\\t%{PROVIDENAME}\\t%{PROVIDEFLAGS}\\t%{PROVIDEVERSION}\\n]"
    "[R\\t%{REQUIRENAME}\\t%{REQUIREFLAGS}\\t%{REQUIREVERSION}\\n]"
)

CHANGELOG_MARKER = "@@pkgrepo-changelog@@"
CHANGELOG_QUERY = (
    f"[{CHANGELOG_MARKER}%{{CHANGELOGTIME}}\\t%{{CHANGELOGNAME}}\\n%{{CHANGELOGTEXT}}\\n]"
)

# rpmsenseFlags bits
SENSE_LESS = 0x02
SENSE_GREATER = 0x04
SENSE_EQUAL = 0x08
SENSE_PREREQ = 0x40
SENSE_SCRIPT_PRE = 0x200
SENSE_SCRIPT_POST = 0x400

NONE_VALUE = "(none)"


class RpmMetadataExtractor(ControlExtractor):
    """Extractor for RPM packages (.rpm files).

    RPM packages contain:
    - Lead: RPM version info
    - Signature: Package verification
    - Header: Metadata and scripts
    - Payload: cpio archive (usually gzip/xz/zstd compressed)
    """

    def __init__(self, timeout: int = 30):
        """Initialize extractor.

        Args:
            timeout: rpm query timeout in seconds
        """
        self.timeout = timeout

    @property
    def packaging_type(self) -> PackagingType:
        """Return packaging type."""
        return PackagingType.RPM

    def extract(self, data: bytes) -> RpmRecord:
        """Return the structured header fields of an RPM package.

        Args:
            data: Raw .rpm bytes

        Returns:
            RpmRecord with header fields, files, dependencies and changelog

        Raises:
            ExtractionError: If the data is not an RPM or rpm fails
        """
        if not data.startswith(RPM_MAGIC):
            raise ExtractionError("Invalid RPM magic bytes")

        with self.staged(data) as path:
            header = self._query(path, "\\n".join(f"%{{{tag}}}" for tag in HEADER_TAGS) + "\\n")
            description = self._query(path, "%{DESCRIPTION}")
            files = self._query(path, "[%{FILEMODES:perms} %{FILENAMES}\\n]")
            dependencies = self._query(path, DEPENDENCY_QUERY)
            changelog = self._query(path, CHANGELOG_QUERY)

        record = self._parse_header(header)
        record.description = description.strip()
        record.files = self._parse_file_list(files)
        record.provides, record.requires = self._parse_dependencies(dependencies)
        record.changelogs = self._parse_changelog(changelog)

        logger.debug(
            f"Extracted RPM header for {record.name}-{record.version}-{record.release}.{record.arch}"
        )
        return record

    def _query(self, path: Path, queryformat: str) -> str:
        """Run one ``rpm -qp --queryformat`` query.

        Args:
            path: Path to .rpm file
            queryformat: rpm query format string

        Returns:
            Decoded query output

        Raises:
            ExtractionError: If rpm fails, is missing or times out
        """
        try:
            result = subprocess.run(
                ["rpm", "-qp", "--nosignature", "--queryformat", queryformat, str(path)],
                capture_output=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode() if e.stderr else str(e)
            raise ExtractionError(f"Failed to read RPM metadata: {stderr}") from e
        except FileNotFoundError as e:
            raise ExtractionError("rpm command not found. Install rpm.") from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionError("RPM query timed out") from e

        return result.stdout.decode("utf-8", errors="replace")

    def _parse_header(self, output: str) -> RpmRecord:
        """Parse the single-line header fields.

        Args:
            output: Query output, one tag value per line

        Returns:
            RpmRecord without files, dependencies or changelog

        Raises:
            ExtractionError: If the output is truncated
        """
        lines = output.split("\n")
        if len(lines) < len(HEADER_TAGS):
            raise ExtractionError(
                f"Unexpected RPM header output ({len(lines)} of {len(HEADER_TAGS)} fields)"
            )
        values = dict(zip(HEADER_TAGS, (_text(line) for line in lines)))

        return RpmRecord(
            name=values["NAME"],
            epoch=_number(values["EPOCH"]),
            version=values["VERSION"],
            release=values["RELEASE"],
            arch=values["ARCH"] or "noarch",
            summary=values["SUMMARY"],
            packager=values["PACKAGER"],
            url=values["URL"],
            license=values["LICENSE"],
            vendor=values["VENDOR"],
            group=values["GROUP"],
            buildhost=values["BUILDHOST"],
            sourcerpm=values["SOURCERPM"],
            build_time=_number(values["BUILDTIME"]),
            installed_size=_number(values["SIZE"]),
            archive_size=_number(values["ARCHIVESIZE"]),
        )

    def _parse_file_list(self, output: str) -> List[RpmFile]:
        """Parse ``FILEMODES:perms FILENAMES`` lines.

        Args:
            output: Query output

        Returns:
            List of RpmFile objects
        """
        file_list = []

        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue

            # Format: permissions path (e.g., "-rwxr-xr-x /usr/bin/curl")
            parts = line.split(None, 1)
            if len(parts) == 2:
                permissions, file_path = parts
                file_type = permissions[0] if permissions else "-"
            else:
                file_path = parts[0]
                file_type = "-"

            file_list.append(RpmFile(path=file_path, file_type=file_type))

        return file_list

    def _parse_dependencies(
        self, output: str
    ) -> Tuple[List[RpmDependency], List[RpmDependency]]:
        """Parse provides (``P``) and requires (``R``) lines.

        rpmlib() requirements are internal to rpm and dropped.

        Args:
            output: Query output

        Returns:
            Tuple of (provides, requires)
        """
        provides = []
        requires = []

        for line in output.splitlines():
            parts = line.split("\t")
            if len(parts) != 4 or not parts[1]:
                continue

            kind, name, flags_str, evr = parts
            if kind == "R" and name.startswith("rpmlib("):
                continue

            flags = _number(flags_str)
            epoch, version, release = _split_evr(evr)
            dependency = RpmDependency(
                name=name,
                flags=_sense_to_flags(flags) if version else None,
                epoch=epoch,
                version=version,
                release=release,
                pre=kind == "R"
                and bool(flags & (SENSE_PREREQ | SENSE_SCRIPT_PRE | SENSE_SCRIPT_POST)),
            )

            if kind == "P":
                provides.append(dependency)
            elif kind == "R" and dependency not in requires:
                requires.append(dependency)

        return provides, requires

    def _parse_changelog(self, output: str) -> List[RpmChangelog]:
        """Parse marker-delimited changelog entries.

        Args:
            output: Query output

        Returns:
            List of RpmChangelog in header order
        """
        changelogs = []

        for chunk in output.split(CHANGELOG_MARKER):
            if not chunk.strip():
                continue
            head, _, text = chunk.partition("\n")
            date_str, _, author = head.partition("\t")
            changelogs.append(
                RpmChangelog(author=author.strip(), date=_number(date_str), text=text.strip())
            )

        return changelogs


def _text(value: str) -> str:
    """Map rpm's ``(none)`` placeholder to an empty string."""
    value = value.strip()
    return "" if value == NONE_VALUE else value


def _number(value: str) -> int:
    """Parse an integer tag value, treating ``(none)`` and junk as 0."""
    try:
        return int(value.strip())
    except ValueError:
        return 0


def _split_evr(evr: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Split ``[epoch:]version[-release]`` into its parts.

    Args:
        evr: EVR string from a dependency entry

    Returns:
        Tuple of (epoch, version, release), None for absent parts
    """
    evr = evr.strip()
    if not evr:
        return None, None, None

    epoch = "0"
    if ":" in evr:
        epoch, evr = evr.split(":", 1)

    release = None
    if "-" in evr:
        evr, release = evr.rsplit("-", 1)

    return epoch, evr, release


def _sense_to_flags(flags: int) -> Optional[str]:
    """Translate rpmsense comparison bits to the createrepo flag name."""
    less = bool(flags & SENSE_LESS)
    greater = bool(flags & SENSE_GREATER)
    equal = bool(flags & SENSE_EQUAL)

    if less and equal:
        return "LE"
    if greater and equal:
        return "GE"
    if equal:
        return "EQ"
    if less:
        return "LT"
    if greater:
        return "GT"
    return None
