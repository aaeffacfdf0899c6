"""Key server selection.

Key servers are tried protocol by protocol: every server over HTTPS, then
every server over HKP, then every server over plain HTTP. Within each
protocol the servers appear in a random order that is shared by all
protocol groups, so the first configured server is not always hit first
while protocol preference is still respected.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from dl_verify.constants import DEFAULT_KEY_SERVERS, HKP_PORT


def check_key_server_host(host: str) -> str:
    """Return ``host`` if it is a bare host name.

    Schemes and ports are chosen per protocol, so a server given as
    ``hkps://host`` or ``host:443`` cannot be queried.

    Raises:
        ValueError: If the host carries a scheme, port, path or query

    """
    parsed = urlsplit(f"//{host}")
    try:
        has_port = parsed.port is not None or parsed.netloc.endswith(":")
    except ValueError:
        has_port = True
    if (
        "://" in host
        or not parsed.hostname
        or has_port
        or parsed.path
        or parsed.query
        or parsed.fragment
        or parsed.username
    ):
        msg = (
            f"Invalid key server {host!r}: give a bare host name such as "
            "keys.openpgp.org, without scheme or port"
        )
        raise ValueError(msg)
    return host


def add_default_key_servers(servers: Iterable[str]) -> list[str]:
    """Return ``servers`` followed by any missing built-in defaults.

    First-seen order is kept and duplicates are dropped.
    """
    return list(dict.fromkeys([*servers, *DEFAULT_KEY_SERVERS]))


@dataclass
class KeyServerInformation:
    """Key servers to query and the protocols to query them with."""

    key_servers: list[str] = field(default_factory=list)
    use_https: bool = True
    use_hkp: bool = False
    use_http: bool = False

    @property
    def protocol_count(self) -> int:
        """Number of enabled protocols."""
        return sum((self.use_https, self.use_hkp, self.use_http))

    def add_default_key_servers(self) -> KeyServerInformation:
        """Add the built-in default servers that are not already listed."""
        self.key_servers = add_default_key_servers(self.key_servers)
        return self

    def key_server_urls(self, rng: random.Random | None = None) -> list[str]:
        """Build the ordered list of key server base URLs to try.

        Args:
            rng: Random source for the server permutation. Defaults to the
                module level generator.

        Returns:
            ``protocol_count * len(key_servers)`` URLs such as
            ``https://host``, ``http://host:11371`` and ``http://host``,
            grouped by protocol in the order HTTPS, HKP, HTTP. Empty when
            no protocol is enabled.

        """
        if self.protocol_count == 0:
            return []

        order = list(range(len(self.key_servers)))
        (rng or random).shuffle(order)
        servers = [self.key_servers[index] for index in order]

        urls: list[str] = []
        if self.use_https:
            urls.extend(f"https://{server}" for server in servers)
        if self.use_hkp:
            urls.extend(f"http://{server}:{HKP_PORT}" for server in servers)
        if self.use_http:
            urls.extend(f"http://{server}" for server in servers)
        return urls


def default_key_server_information() -> KeyServerInformation:
    """Key server settings used when nothing is configured.

    Only HTTPS is enabled; HKP and HTTP are available as opt-in fallbacks
    for hosts without working TLS.
    """
    return KeyServerInformation(key_servers=list(DEFAULT_KEY_SERVERS))
