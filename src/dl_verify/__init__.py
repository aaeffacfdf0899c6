"""Top-level package for dl-verify."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dl-verify")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
