"""GPG key identifiers, key server selection and key download."""

from dl_verify.core.gpg.downloader import (
    FatalFailure,
    KeyDownloader,
    KeyFound,
    KeyLookupOutcome,
    RetryableFailure,
    parse_armored_keyring,
)
from dl_verify.core.gpg.keys import (
    KeyID,
    KeyLength,
    new_cleaned_key_id,
    new_key_id,
)
from dl_verify.core.gpg.keyserver import (
    KeyServerInformation,
    add_default_key_servers,
    check_key_server_host,
    default_key_server_information,
)

__all__ = [
    "FatalFailure",
    "KeyDownloader",
    "KeyFound",
    "KeyID",
    "KeyLength",
    "KeyLookupOutcome",
    "KeyServerInformation",
    "RetryableFailure",
    "add_default_key_servers",
    "check_key_server_host",
    "default_key_server_information",
    "new_cleaned_key_id",
    "new_key_id",
    "parse_armored_keyring",
]
