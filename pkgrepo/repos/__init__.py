"""Repository index generators.

This module renders the metadata documents of APT and RPM repositories
from a selected package pool.
"""

from .apt import AptIndices, package_index, release_index
from .base import FileEntry, IndexGenerator, ListingMetadata
from .registry import build_repository, create_generator, get_generator_class
from .rpm import (
    RpmIndices,
    filelists_index,
    other_index,
    primary_index,
    repomd_index,
)

__all__ = [
    "AptIndices",
    "FileEntry",
    "IndexGenerator",
    "ListingMetadata",
    "RpmIndices",
    "build_repository",
    "create_generator",
    "filelists_index",
    "get_generator_class",
    "other_index",
    "package_index",
    "primary_index",
    "release_index",
    "repomd_index",
]
