"""Package format support: packaging types and control-data extractors."""

from .base import (
    ControlExtractor,
    ControlRecord,
    ExtractionError,
    PackagingType,
    RpmChangelog,
    RpmDependency,
    RpmFile,
    RpmRecord,
)
from .registry import (
    ExtractorRegistry,
    get_extractor,
    get_registry,
    register_extractor,
)

__all__ = [
    "ControlExtractor",
    "ControlRecord",
    "ExtractionError",
    "PackagingType",
    "RpmChangelog",
    "RpmDependency",
    "RpmFile",
    "RpmRecord",
    "ExtractorRegistry",
    "get_extractor",
    "get_registry",
    "register_extractor",
]
