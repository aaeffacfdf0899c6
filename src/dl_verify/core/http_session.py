"""HTTP session utilities for dl-verify.

Creates the aiohttp session shared by the artifact download and the key
server lookups, with timeouts taken from the network configuration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from dl_verify import __version__
from dl_verify.constants import APP_NAME, DEFAULT_TIMEOUT_SECONDS
from dl_verify.domain.types import GlobalConfig


def create_client_timeout(timeout_seconds: int) -> aiohttp.ClientTimeout:
    """Build the per-request timeout used for every HTTP call.

    Args:
        timeout_seconds: Connect timeout; reads may take three times as
            long and a whole transfer sixty times as long.

    """
    return aiohttp.ClientTimeout(
        total=timeout_seconds * 60,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )


@asynccontextmanager
async def create_http_session(
    global_config: GlobalConfig,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    Args:
        global_config: Global configuration dictionary

    Yields:
        Configured aiohttp.ClientSession

    """
    network_cfg = global_config.get("network", {})
    timeout_seconds = int(
        network_cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    )

    async with aiohttp.ClientSession(
        timeout=create_client_timeout(timeout_seconds),
        headers={"User-Agent": f"{APP_NAME}/{__version__}"},
    ) as session:
        yield session
