"""Public key download from HKP key servers.

Each candidate URL produced by ``KeyServerInformation.key_server_urls`` is
queried in turn. A query ends in one of three outcomes:

- ``KeyFound``: exactly one key came back, the lookup stops here
- ``RetryableFailure``: this server cannot help (404, wrong content type,
  empty keyring), the next candidate is tried
- ``FatalFailure``: the server could not be reached, or it returned several
  keys for one identifier; the lookup stops with this error

When every candidate fails with a retryable error the last of those errors
is raised.
"""

from __future__ import annotations

import asyncio
import random
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import aiohttp
import pgpy
from pgpy.errors import PGPError

from dl_verify.constants import (
    ARMORED_PUBLIC_KEY_HEADER,
    KEYSERVER_LOOKUP_PATH,
    PGP_KEYS_CONTENT_TYPE,
)
from dl_verify.core.gpg.keys import KeyLength
from dl_verify.core.gpg.keyserver import (
    KeyServerInformation,
    default_key_server_information,
)
from dl_verify.exceptions import (
    KeyNotFoundError,
    KeyServerError,
    KeyServerTransportError,
    MultipleKeysReturnedError,
    NoKeyServersError,
    UnexpectedContentTypeError,
)
from dl_verify.logger import get_logger

if TYPE_CHECKING:
    from dl_verify.core.gpg.keys import KeyID

logger = get_logger(__name__)

_ARMORED_BLOCK_PATTERN = re.compile(
    re.escape(ARMORED_PUBLIC_KEY_HEADER)
    + r".*?-----END PGP PUBLIC KEY BLOCK-----",
    re.DOTALL,
)


@dataclass(slots=True, frozen=True)
class KeyFound:
    """A single matching key was returned."""

    key: pgpy.PGPKey
    url: str


@dataclass(slots=True, frozen=True)
class RetryableFailure:
    """The server could not provide the key; try the next one."""

    error: KeyServerError


@dataclass(slots=True, frozen=True)
class FatalFailure:
    """The lookup must stop with this error."""

    error: KeyServerError


KeyLookupOutcome = KeyFound | RetryableFailure | FatalFailure


def key_fingerprint(key: pgpy.PGPKey) -> str:
    """Return the key's fingerprint as upper-case hex without spaces."""
    return str(key.fingerprint).replace(" ", "").upper()


def parse_armored_keyring(text: str) -> list[pgpy.PGPKey]:
    """Parse every primary public key in an ASCII-armored keyring.

    Key servers may return several keys either as separate armored blocks
    or inside a single block; both are counted. Blocks that cannot be
    parsed contribute no keys.

    Args:
        text: Response body from the key server

    Returns:
        Distinct primary keys, in the order they were found

    """
    keys: dict[str, pgpy.PGPKey] = {}
    for block in _ARMORED_BLOCK_PATTERN.findall(text):
        try:
            loaded = pgpy.PGPKey.from_blob(block)
        except (PGPError, ValueError, TypeError, NotImplementedError) as e:
            logger.debug("Ignoring unparseable key block: %s", e)
            continue

        if isinstance(loaded, tuple):
            primary, others = loaded
        else:
            primary, others = loaded, {}

        for candidate in (primary, *others.values()):
            if candidate.is_primary:
                keys.setdefault(key_fingerprint(candidate), candidate)

    return list(keys.values())


def build_lookup_url(base_url: str, key: KeyID) -> str:
    """Build the HKP ``get`` URL for a key on one key server."""
    query = urlencode(
        {
            "op": "get",
            "search": f"0x{key}",
            "exact": "on",
            # machine readable output, without surrounding HTML
            "options": "mr",
        }
    )
    return f"{base_url}{KEYSERVER_LOOKUP_PATH}?{query}"


class KeyDownloader:
    """Resolves a key identifier to a public key using key servers."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: float,
        key_server_info: KeyServerInformation | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Create a downloader bound to a caller-owned HTTP session.

        Args:
            session: HTTP session used for every query. Required; no
                session is ever created implicitly.
            timeout: Deadline in seconds for the whole lookup across all
                candidates. Required.
            key_server_info: Servers and protocols to use (defaults to
                the built-in key servers over HTTPS)
            rng: Random source for server ordering

        Raises:
            ValueError: If the session or timeout is missing

        """
        if session is None:
            msg = "An HTTP session is required to download keys"
            raise ValueError(msg)
        if timeout is None or timeout <= 0:
            msg = "A positive timeout is required to download keys"
            raise ValueError(msg)

        self.session = session
        self.timeout = timeout
        self.key_server_info = (
            key_server_info or default_key_server_information()
        )
        self._rng = rng

    async def download_key(self, key: KeyID) -> pgpy.PGPKey:
        """Download the single public key matching ``key``.

        Args:
            key: Validated key identifier

        Returns:
            The public key returned by the first server that had it

        Raises:
            GpgKeyError: If the key fails re-validation
            KeyServerError: If no server provided exactly one key, a server
                was unreachable, or the deadline passed

        """
        key = key.clean()
        candidates = self.key_server_info.key_server_urls(self._rng)
        logger.debug(
            "Looking up key %s on %d candidate URL(s)", key, len(candidates)
        )

        try:
            async with asyncio.timeout(self.timeout):
                return await self._resolve(key, candidates)
        except TimeoutError as e:
            logger.exception("Key lookup for %s timed out", key)
            raise KeyServerTransportError(
                None, f"key lookup timed out after {self.timeout} seconds"
            ) from e

    async def _resolve(
        self, key: KeyID, candidates: list[str]
    ) -> pgpy.PGPKey:
        last_retryable: KeyServerError | None = None

        for base_url in candidates:
            outcome = await self.query_key_server(base_url, key)

            if isinstance(outcome, KeyFound):
                logger.info(
                    "Found key %s on %s",
                    key_fingerprint(outcome.key),
                    base_url,
                )
                return outcome.key

            if isinstance(outcome, FatalFailure):
                logger.error(
                    "Key lookup on %s failed: %s", base_url, outcome.error
                )
                raise outcome.error

            logger.info(
                "Download failed, trying another server: %s", outcome.error
            )
            last_retryable = outcome.error

        if last_retryable is None:
            raise NoKeyServersError

        logger.error("All servers failed to provide key %s", key)
        raise last_retryable

    async def query_key_server(
        self, base_url: str, key: KeyID
    ) -> KeyLookupOutcome:
        """Ask one key server for ``key`` and classify the answer.

        Args:
            base_url: Key server base URL, e.g. ``https://pgp.mit.edu``
            key: Key identifier to search for

        Returns:
            The outcome of this single query

        """
        url = build_lookup_url(base_url, key)
        logger.debug("Querying %s", url)

        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status <= 299:  # noqa: PLR2004
                    logger.debug("   Status: %s", response.status)
                    return RetryableFailure(KeyNotFoundError(url))

                content_type = (response.content_type or "").lower()
                if content_type != PGP_KEYS_CONTENT_TYPE:
                    return RetryableFailure(
                        UnexpectedContentTypeError(url, content_type)
                    )

                body = await response.read()
        except (aiohttp.ClientError, TimeoutError) as e:
            return FatalFailure(
                KeyServerTransportError(url, str(e) or type(e).__name__)
            )

        keys = parse_armored_keyring(body.decode("utf-8", errors="replace"))
        if not keys:
            return RetryableFailure(KeyNotFoundError(url))
        if len(keys) > 1:
            return FatalFailure(MultipleKeysReturnedError(url, len(keys)))

        found = keys[0]
        fingerprint = key_fingerprint(found)
        if (
            key.length != KeyLength.FINGERPRINT_V3
            and not fingerprint.endswith(key.value)
        ):
            logger.warning(
                "Key %s returned by %s does not end with requested ID %s",
                fingerprint,
                base_url,
                key,
            )
        return KeyFound(found, base_url)
