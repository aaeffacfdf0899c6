"""Release of a verified artifact to its destination."""

from pathlib import Path
from typing import BinaryIO

from dl_verify.constants import DOWNLOAD_CHUNK_SIZE
from dl_verify.logger import get_logger

logger = get_logger(__name__)


def write_out_file(path: Path, stream: BinaryIO) -> int:
    """Copy the file at ``path`` to a binary stream.

    Args:
        path: Verified file
        stream: Destination, e.g. ``sys.stdout.buffer``

    Returns:
        Number of bytes written

    Raises:
        OSError: If reading or writing fails. Some bytes may already have
            reached the stream.

    """
    written = 0
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(DOWNLOAD_CHUNK_SIZE), b""):
                stream.write(chunk)
                written += len(chunk)
        stream.flush()
    except OSError:
        logger.exception("Failed to write out %s", path)
        raise

    logger.debug("Wrote %d bytes from %s", written, path)
    return written
