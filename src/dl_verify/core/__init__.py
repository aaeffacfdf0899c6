"""Core verification engine: checksums, GPG keys and downloads."""
