"""Selection of the packages that apply to a requested distribution."""

from typing import List, Sequence

from .common.logger import get_logger
from .package import Dist, Package

logger = get_logger("selector")


def select_packages(pool: Sequence[Package], dist: Dist) -> List[Package]:
    """Select the packages that serve a requested distribution.

    Packages are first filtered by the packaging type of the requested
    family. For Ubuntu and Fedora, packages built for exactly the
    requested distribution (family and version) are preferred; when there
    are none, the whole family subset is returned so that generic
    packages still serve every version. Debian is selected on family
    alone.

    Args:
        pool: Classified packages
        dist: Requested distribution

    Returns:
        Selected packages, in pool order
    """
    packaging_type = dist.family.packaging_type
    packages = [p for p in pool if p.packaging_type is packaging_type]

    if dist.family.version_sensitive:
        exact = [p for p in packages if p.distribution == dist]
        if exact:
            logger.debug(f"Selected {len(exact)} package(s) built for {dist}")
            return exact

    logger.debug(f"Selected {len(packages)} {packaging_type.value} package(s) for {dist}")
    return packages
