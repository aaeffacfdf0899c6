"""Pytest configuration and fixtures for core module tests.

Response factories for mocked aiohttp sessions and a deterministic random
source for key server ordering. They are plain definitions so that the
workflow and CLI tests can import them too.
"""

import random
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

from dl_verify.constants import PGP_KEYS_CONTENT_TYPE


class NoShuffle(random.Random):
    """Random source that keeps the configured server order."""

    def shuffle(self, x: list) -> None:  # type: ignore[override]
        """Leave the list untouched."""


# =============================================================================
# Async Helpers
# =============================================================================


async def async_chunk_gen(
    chunks: list[bytes],
) -> AsyncGenerator[bytes, None]:
    """Async generator yielding chunks for simulating HTTP responses.

    Args:
        chunks: List of byte chunks to yield.

    Yields:
        Individual byte chunks.

    """
    for chunk in chunks:
        yield chunk


def make_download_response(chunks: list[bytes]) -> AsyncMock:
    """Build a mocked streaming response for an artifact download."""
    response = AsyncMock()
    response.__aenter__.return_value = response
    response.__aexit__.return_value = None
    response.status = 200
    response.headers = {"Content-Length": str(sum(map(len, chunks)))}
    response.content.iter_chunked = lambda size: async_chunk_gen(chunks)
    response.raise_for_status = MagicMock()
    return response


def make_key_response(
    body: str | bytes = b"",
    status: int = 200,
    content_type: str = PGP_KEYS_CONTENT_TYPE,
) -> AsyncMock:
    """Build a mocked key server response."""
    response = AsyncMock()
    response.__aenter__.return_value = response
    response.__aexit__.return_value = None
    response.status = status
    response.content_type = content_type
    response.read = AsyncMock(
        return_value=body.encode() if isinstance(body, str) else body
    )
    return response

