"""Hex digests of in-memory buffers."""

import hashlib
from enum import Enum
from typing import Dict, Union


class DigestAlgorithm(Enum):
    """Digest algorithms used in repository metadata."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


ALL_ALGORITHMS = (
    DigestAlgorithm.MD5,
    DigestAlgorithm.SHA1,
    DigestAlgorithm.SHA256,
    DigestAlgorithm.SHA512,
)


def digest(algorithm: Union[DigestAlgorithm, str], data: bytes) -> str:
    """Calculate the lowercase hex digest of a buffer.

    Args:
        algorithm: Hash algorithm (DigestAlgorithm or its name, e.g. "sha256")
        data: Bytes to hash

    Returns:
        Hexadecimal digest string

    Raises:
        ValueError: If the algorithm is not supported
    """
    if not isinstance(algorithm, DigestAlgorithm):
        try:
            algorithm = DigestAlgorithm(str(algorithm).lower())
        except ValueError:
            raise ValueError(f"Unsupported algorithm: {algorithm}") from None

    if algorithm is DigestAlgorithm.SHA256:
        hasher = hashlib.sha256()
    elif algorithm is DigestAlgorithm.SHA512:
        hasher = hashlib.sha512()
    elif algorithm is DigestAlgorithm.SHA1:
        hasher = hashlib.sha1()
    else:
        hasher = hashlib.md5()

    hasher.update(data)
    return hasher.hexdigest()


def all_digests(data: bytes) -> Dict[DigestAlgorithm, str]:
    """Calculate every supported digest of a buffer.

    Args:
        data: Bytes to hash

    Returns:
        Mapping of algorithm to hex digest
    """
    return {algorithm: digest(algorithm, data) for algorithm in ALL_ALGORITHMS}
