"""Tests for package classification."""

import threading
from datetime import datetime, timezone

import pytest
from packaging.version import Version

from pkgrepo.formats.base import PackagingType
from pkgrepo.package import (
    Arch,
    ClassificationError,
    Dist,
    DistFamily,
    MissingRawDataError,
    classify,
    detect_distribution,
    parse_dist_version,
    split_at_numeric,
    split_extension,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize(
        "filename,packaging_type,dist",
        [
            (
                "OpenBangla-Keyboard_2.0.0-ubuntu22.04.deb",
                PackagingType.DEB,
                Dist(DistFamily.UBUNTU, Version("22.04")),
            ),
            (
                "OpenBangla-Keyboard_2.0.0-fedora36.rpm",
                PackagingType.RPM,
                Dist(DistFamily.FEDORA, Version("36.0.0")),
            ),
            ("caprine_2.56.1_amd64.deb", PackagingType.DEB, None),
            (
                "OpenBangla-Keyboard_2.0.0-debian10-buster.deb",
                PackagingType.DEB,
                Dist(DistFamily.DEBIAN, Version("10")),
            ),
            (
                "OpenBangla-Keyboard_2.0.0-debian9-stretch.deb",
                PackagingType.DEB,
                Dist(DistFamily.DEBIAN, Version("9")),
            ),
            ("tool-ubuntu.deb", PackagingType.DEB, Dist(DistFamily.UBUNTU, None)),
        ],
    )
    def test_table(self, filename, packaging_type, dist):
        """Test packaging type and distribution detection."""
        package = classify(filename, "2.0.0", "", EPOCH)
        assert package.packaging_type == packaging_type
        assert package.distribution == dist

    def test_keeps_declared_fields(self):
        """Test caller-supplied fields are kept verbatim."""
        created = datetime(2023, 11, 8, 16, 40, 12, tzinfo=timezone.utc)
        package = classify("caprine_2.56.1_amd64.deb", "v2.56.1", "https://x/caprine.deb", created)

        assert package.declared_version == "v2.56.1"
        assert package.download_url == "https://x/caprine.deb"
        assert package.created_at == created
        assert package.is_deb

    def test_naive_timestamp_is_utc(self):
        """Test naive creation times are taken as UTC."""
        package = classify("a.deb", "1", "", datetime(2023, 1, 1))
        assert package.created_at.tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "filename",
        ["caprine_2.56.1_amd64.snap", "deb", ".deb", "package.DEB", "archive.tar.zst"],
    )
    def test_unrecognized_extension(self, filename):
        """Test unknown extensions raise ClassificationError."""
        with pytest.raises(ClassificationError):
            classify(filename, "1.0", "", EPOCH)

    def test_first_distribution_token_wins(self):
        """Test the first token naming a distribution decides."""
        package = classify("tool-debian11-ubuntu22.04.deb", "1.0", "", EPOCH)
        assert package.distribution == Dist(DistFamily.DEBIAN, Version("11"))


class TestFilenameHeuristics:
    """Tests for the filename parsing helpers."""

    def test_split_extension(self):
        """Test extension splitting."""
        assert split_extension("OpenBangla-Keyboard_2.0.0-ubuntu22.04.deb") == (
            PackagingType.DEB,
            "OpenBangla-Keyboard_2.0.0-ubuntu22.04",
        )
        assert split_extension("OpenBangla-Keyboard_2.0.0-fedora36.rpm") == (
            PackagingType.RPM,
            "OpenBangla-Keyboard_2.0.0-fedora36",
        )
        assert split_extension("caprine_2.56.1_amd64.snap") is None
        assert split_extension("deb") is None

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("ubuntu24.10", "24.10"),
            ("ubuntu", None),
            ("fedora36", "36"),
            ("debian10", "10"),
            ("22.04", None),
            ("x86_64", "86_64"),
        ],
    )
    def test_split_at_numeric(self, token, expected):
        """Test the letter-to-digit boundary."""
        assert split_at_numeric(token) == expected

    def test_parse_dist_version(self):
        """Test version parsing from distribution tokens."""
        assert parse_dist_version("ubuntu22.10") == Version("22.10.0")
        assert parse_dist_version("fedora37") == Version("37.0.0")
        assert parse_dist_version("ubuntu") is None
        assert parse_dist_version("ubuntuX1y") is None

    def test_detect_distribution_none(self):
        """Test stems without a distribution token."""
        assert detect_distribution("caprine_2.56.1_amd64") is None


class TestDist:
    """Tests for Dist values."""

    def test_equality_includes_version(self):
        """Test family and version must both match."""
        assert Dist(DistFamily.UBUNTU) != Dist.of(DistFamily.UBUNTU, "22.04")
        assert Dist.of(DistFamily.UBUNTU, "22.04") == Dist(DistFamily.UBUNTU, Version("22.04"))
        assert Dist.of(DistFamily.UBUNTU, "22.04") != Dist.of(DistFamily.DEBIAN, "22.04")

    def test_of_unparsable(self):
        """Test unparsable versions yield no version."""
        assert Dist.of(DistFamily.DEBIAN, "bookworm") == Dist(DistFamily.DEBIAN)

    def test_family_packaging(self):
        """Test family to packaging type mapping."""
        assert DistFamily.UBUNTU.packaging_type == PackagingType.DEB
        assert DistFamily.DEBIAN.packaging_type == PackagingType.DEB
        assert DistFamily.FEDORA.packaging_type == PackagingType.RPM

    def test_str(self):
        """Test string form."""
        assert str(Dist.of(DistFamily.FEDORA, "38")) == "fedora38"
        assert str(Dist(DistFamily.UBUNTU)) == "ubuntu"

    def test_arch(self):
        """Test architecture parsing."""
        assert Arch.parse("amd64") is Arch.AMD64
        assert Arch.parse("arm64") is None


class TestPackage:
    """Tests for Package accessors and the raw-data slot."""

    def test_file_name_from_url(self, make_package):
        """Test the basename comes from the URL."""
        package = make_package(
            "ignored.deb",
            url="https://github.com/o/r/releases/download/3.0.0/fcitx-openbangla_3.0.0.deb",
        )
        assert package.file_name == "fcitx-openbangla_3.0.0.deb"
        assert package.pool_path() == "pool/stable/3.0.0/fcitx-openbangla_3.0.0.deb"
        assert package.pool_path("pool/main") == "pool/main/3.0.0/fcitx-openbangla_3.0.0.deb"

    def test_file_name_missing(self, make_package):
        """Test URLs without a final segment are rejected."""
        package = make_package("a.deb", url="https://example.com/releases/")
        with pytest.raises(ValueError):
            package.file_name

    def test_data_starts_empty(self, make_package):
        """Test a new package has no data."""
        package = make_package("a.deb")
        assert package.data() is None
        assert not package.has_data
        with pytest.raises(MissingRawDataError):
            package.require_data()

    def test_set_data(self, make_package):
        """Test populating the slot."""
        package = make_package("a.deb")
        package.set_data(bytearray(b"!<arch>\n"))

        assert package.data() == b"!<arch>\n"
        assert isinstance(package.data(), bytes)
        assert package.require_data() == b"!<arch>\n"

    def test_concurrent_readers_see_whole_buffers(self, make_package):
        """Test readers only ever see empty or complete data."""
        package = make_package("a.deb")
        payloads = [bytes([i]) * 4096 for i in range(1, 9)]
        observed = []

        def writer(payload):
            package.set_data(payload)

        def reader():
            for _ in range(200):
                observed.append(package.data())

        threads = [threading.Thread(target=writer, args=(p,)) for p in payloads]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for data in observed:
            assert data is None or data in payloads
        assert package.data() in payloads

    def test_equality(self, make_package):
        """Test packages compare by fields and data."""
        assert make_package("a-ubuntu22.04.deb") == make_package("a-ubuntu22.04.deb")
        assert make_package("a-ubuntu22.04.deb") != make_package("a-ubuntu20.04.deb")
        assert make_package("a.deb", data=b"1") != make_package("a.deb", data=b"2")
