"""Extractor registry.

Maps packaging types to the control extractor that reads them, so the
index generators can be pointed at alternative extractors.
"""

from typing import Dict, List, Optional

from ..common.logger import get_logger
from .base import ControlExtractor, PackagingType

logger = get_logger("format_registry")


class ExtractorRegistry:
    """Registry of control extractors keyed by packaging type."""

    def __init__(self) -> None:
        self._extractors: Dict[PackagingType, ControlExtractor] = {}

    def register(self, extractor: ControlExtractor) -> None:
        """Register an extractor.

        Args:
            extractor: ControlExtractor instance to register
        """
        packaging_type = extractor.packaging_type
        if packaging_type in self._extractors:
            logger.warning(f"Overwriting existing extractor for: {packaging_type.value}")
        self._extractors[packaging_type] = extractor
        logger.debug(f"Registered extractor: {packaging_type.value}")

    def unregister(self, packaging_type: PackagingType) -> None:
        """Unregister the extractor for a packaging type."""
        if packaging_type in self._extractors:
            del self._extractors[packaging_type]
            logger.debug(f"Unregistered extractor: {packaging_type.value}")

    def get_extractor(self, packaging_type: PackagingType) -> Optional[ControlExtractor]:
        """Get the extractor for a packaging type.

        Args:
            packaging_type: Packaging type

        Returns:
            ControlExtractor or None if none is registered
        """
        return self._extractors.get(packaging_type)

    def list_types(self) -> List[PackagingType]:
        """List registered packaging types."""
        return list(self._extractors.keys())

    def clear(self) -> None:
        """Clear all registered extractors (mainly for testing)."""
        self._extractors.clear()


# Global registry instance
_registry = ExtractorRegistry()


def get_registry() -> ExtractorRegistry:
    """Get the global extractor registry.

    Returns:
        Global ExtractorRegistry instance
    """
    return _registry


def register_extractor(extractor: ControlExtractor) -> None:
    """Register an extractor with the global registry.

    Args:
        extractor: ControlExtractor instance to register
    """
    _registry.register(extractor)


def get_extractor(packaging_type: PackagingType, timeout: int = 30) -> ControlExtractor:
    """Get the extractor for a packaging type.

    Falls back to the built-in dpkg-deb/rpm extractors when nothing is
    registered for the type.

    Args:
        packaging_type: Packaging type
        timeout: Tool timeout for a built-in extractor

    Returns:
        ControlExtractor instance
    """
    extractor = _registry.get_extractor(packaging_type)
    if extractor is not None:
        return extractor

    if packaging_type is PackagingType.DEB:
        from .deb import DebControlExtractor

        return DebControlExtractor(timeout=timeout)

    from .rpm import RpmMetadataExtractor

    return RpmMetadataExtractor(timeout=timeout)
