"""Generator lookup and repository assembly.

Maps packaging types to the index generator that serves them and wires
selection and generation together for one requested distribution.
"""

from typing import Dict, Optional, Sequence, Type

from ..common.config import IndexConfig
from ..common.logger import get_logger
from ..formats.base import ControlExtractor, PackagingType
from ..package import Dist, Package
from ..selector import select_packages
from .apt import AptIndices
from .base import IndexGenerator
from .rpm import RpmIndices

logger = get_logger("repo_registry")

GENERATORS: Dict[PackagingType, Type[IndexGenerator]] = {
    PackagingType.DEB: AptIndices,
    PackagingType.RPM: RpmIndices,
}


def get_generator_class(packaging_type: PackagingType) -> Type[IndexGenerator]:
    """Get the generator class for a packaging type.

    Args:
        packaging_type: Packaging type

    Returns:
        IndexGenerator subclass
    """
    return GENERATORS[packaging_type]


def create_generator(
    pool: Sequence[Package],
    dist: Dist,
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> IndexGenerator:
    """Select the packages for a distribution and build its generator.

    Args:
        pool: Classified packages
        dist: Requested distribution
        config: Repository configuration
        extractor: Control extractor override

    Returns:
        IndexGenerator over the selected packages
    """
    selected = select_packages(pool, dist)
    generator_class = get_generator_class(dist.family.packaging_type)
    return generator_class(selected, config, extractor)


def build_repository(
    pool: Sequence[Package],
    dist: Dist,
    config: Optional[IndexConfig] = None,
    extractor: Optional[ControlExtractor] = None,
) -> Dict[str, bytes]:
    """Generate every metadata document for a requested distribution.

    Nothing is written anywhere; persisting the documents is up to the
    caller.

    Args:
        pool: Classified packages
        dist: Requested distribution
        config: Repository configuration
        extractor: Control extractor override

    Returns:
        Mapping of repository-relative path to document bytes
    """
    generator = create_generator(pool, dist, config, extractor)
    documents = generator.build()
    logger.info(
        f"Generated {generator.generator_name} repository for {dist}: "
        f"{generator.package_count} package(s), {len(documents)} document(s)"
    )
    return documents
