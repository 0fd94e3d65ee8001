"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from typing import Dict

import pytest

from pkgrepo.formats.base import (
    ControlExtractor,
    ControlRecord,
    ExtractionError,
    PackagingType,
    RpmChangelog,
    RpmDependency,
    RpmFile,
    RpmRecord,
)
from pkgrepo.package import classify

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

FCITX_CONTROL = """Package: fcitx-openbangla
Version: 3.0.0
Architecture: amd64
Maintainer: OpenBangla Team <openbanglateam@gmail.com>
Installed-Size: 3264
Depends: libc6 (>= 2.34), libfcitx5core7 (>= 5.0.14)
Section: utils
Priority: optional
Homepage: https://openbangla.github.io
Description: OpenBangla Keyboard for Fcitx
 An OpenSource, Unicode compliant Bengali Input Method.
"""

IBUS_CONTROL = """Package: ibus-openbangla
Version: 3.0.0
Architecture: amd64
Maintainer: OpenBangla Team <openbanglateam@gmail.com>
Installed-Size: 3180
Depends: libc6 (>= 2.34), libibus-1.0-5 (>= 1.5.1)
Section: utils
Priority: optional
Homepage: https://openbangla.github.io
Description: OpenBangla Keyboard for IBus
 An OpenSource, Unicode compliant Bengali Input Method.
"""

FCITX_DATA = b"!<arch>\nfcitx-openbangla payload"
IBUS_DATA = b"!<arch>\nibus-openbangla payload"
RPM_DATA = b"\xed\xab\xee\xdbopenbangla-keyboard payload"


class FakeExtractor(ControlExtractor):
    """In-memory extractor keyed by raw package bytes."""

    def __init__(self, packaging_type: PackagingType, records: Dict[bytes, ControlRecord]):
        self._packaging_type = packaging_type
        self.records = records
        self.calls = 0

    @property
    def packaging_type(self) -> PackagingType:
        return self._packaging_type

    def extract(self, data: bytes) -> ControlRecord:
        self.calls += 1
        if data not in self.records:
            raise ExtractionError("Invalid package header")
        return self.records[data]


@pytest.fixture
def make_package():
    """Factory for classified packages with optional raw data."""

    def _make(filename, version="3.0.0", data=None, created_at=EPOCH, url=None):
        if url is None:
            url = f"https://github.com/mominul/pack-exp2/releases/download/{version}/{filename}"
        package = classify(filename, version, url, created_at)
        if data is not None:
            package.set_data(data)
        return package

    return _make


@pytest.fixture
def deb_extractor():
    """Debian extractor knowing the fcitx and ibus fixtures."""
    return FakeExtractor(
        PackagingType.DEB,
        {FCITX_DATA: FCITX_CONTROL, IBUS_DATA: IBUS_CONTROL},
    )


@pytest.fixture
def rpm_record():
    """RPM header record of the keyboard fixture."""
    return RpmRecord(
        name="openbangla-keyboard",
        version="2.0.0",
        release="1",
        arch="x86_64",
        summary="An OpenSource, Unicode compliant Bengali Input Method",
        description="OpenBangla Keyboard & friends <for> Linux",
        packager="OpenBangla Team",
        url="https://openbangla.github.io",
        license="GPL-3.0",
        group="Unspecified",
        buildhost="builder",
        sourcerpm="openbangla-keyboard-2.0.0-1.src.rpm",
        build_time=1699461612,
        installed_size=3264000,
        archive_size=3270000,
        files=[
            RpmFile(path="/usr/bin/openbangla-gui"),
            RpmFile(path="/usr/share/openbangla-keyboard", file_type="d"),
            RpmFile(path="/usr/share/openbangla-keyboard/layouts/Probhat.json"),
        ],
        provides=[
            RpmDependency(
                name="openbangla-keyboard",
                flags="EQ",
                epoch="0",
                version="2.0.0",
                release="1",
            ),
        ],
        requires=[
            RpmDependency(name="libc.so.6()(64bit)"),
            RpmDependency(name="ibus", flags="GE", epoch="0", version="1.5", pre=True),
        ],
        changelogs=[
            RpmChangelog(author="OpenBangla Team - 2.0.0-1", date=1699401600, text="- Release 2.0.0"),
        ],
    )


@pytest.fixture
def rpm_extractor(rpm_record):
    """RPM extractor knowing the keyboard fixture."""
    return FakeExtractor(PackagingType.RPM, {RPM_DATA: rpm_record})


@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return {
        "apt": {
            "origin": "OpenBangla",
            "label": "OpenBangla",
            "suite": "stable",
            "codename": "stable",
            "component": "main",
            "architecture": "amd64",
        },
        "pool_prefix": "pool/stable",
        "rpm": {"zstd_level": 3},
        "fetch": {"timeout": 30, "max_concurrency": 2},
        "extractor": {"timeout": 10},
        "logging": {"level": "DEBUG", "file_logging": False},
    }


@pytest.fixture
def fcitx_package(make_package):
    """Downloaded fcitx Debian package."""
    return make_package("fcitx-openbangla_3.0.0.deb", data=FCITX_DATA)


@pytest.fixture
def ibus_package(make_package):
    """Downloaded ibus Debian package."""
    return make_package("ibus-openbangla_3.0.0.deb", data=IBUS_DATA)


@pytest.fixture
def rpm_package(make_package):
    """Downloaded Fedora 38 RPM package."""
    return make_package(
        "OpenBangla-Keyboard_2.0.0-fedora38.rpm",
        version="2.0.0",
        data=RPM_DATA,
        created_at=datetime(2023, 11, 8, 16, 40, 12, tzinfo=timezone.utc),
    )
