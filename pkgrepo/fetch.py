"""Concurrent download of package data."""

import asyncio
from typing import List, Optional, Sequence

import httpx

from .common.config import FetchConfig
from .common.logger import get_logger
from .package import FetchError, Package

logger = get_logger("fetch")


async def download_packages(
    packages: Sequence[Package],
    config: Optional[FetchConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Package]:
    """Download every package that has no data yet.

    Failures are logged and reported, never raised, so a partially
    downloaded pool still yields a (partial) index.

    Args:
        packages: Packages to download
        config: Timeout and concurrency settings
        client: HTTP client to use; one is created (and closed) if omitted

    Returns:
        Packages whose download failed
    """
    config = config or FetchConfig()
    pending = [p for p in packages if not p.has_data]
    if not pending:
        return []

    semaphore = asyncio.Semaphore(config.max_concurrency)

    async def fetch_one(http: httpx.AsyncClient, package: Package) -> None:
        async with semaphore:
            await package.download(http)

    if client is None:
        async with httpx.AsyncClient(timeout=config.timeout) as http:
            results = await asyncio.gather(
                *(fetch_one(http, p) for p in pending), return_exceptions=True
            )
    else:
        results = await asyncio.gather(
            *(fetch_one(client, p) for p in pending), return_exceptions=True
        )

    failed = []
    for package, result in zip(pending, results):
        if isinstance(result, FetchError):
            logger.error(str(result))
            failed.append(package)
        elif isinstance(result, BaseException):
            raise result

    logger.info(f"Downloaded {len(pending) - len(failed)} of {len(pending)} package(s)")
    return failed
