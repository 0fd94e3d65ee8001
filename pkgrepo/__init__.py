"""pkgrepo: APT and RPM repository metadata generation.

Classifies .deb and .rpm artifacts by filename, selects the subset that
applies to a requested distribution, and renders the index documents
(Packages/Release, primary/filelists/other/repomd) package managers need.
"""

__version__ = "0.1.0"

from .package import (
    Arch,
    ClassificationError,
    Dist,
    DistFamily,
    FetchError,
    MissingRawDataError,
    Package,
    classify,
)
from .selector import select_packages

__all__ = [
    "Arch",
    "ClassificationError",
    "Dist",
    "DistFamily",
    "FetchError",
    "MissingRawDataError",
    "Package",
    "classify",
    "select_packages",
]
