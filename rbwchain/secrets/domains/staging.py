"""Stage secret content in a temporary file for file mode."""
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator

from .errors import StagingError

TEMP_PREFIX = "rbwchain-"


@contextmanager
def staged_secret_file(content: str, suffix: str, logger: logging.Logger) -> Iterator[str]:
    """
    Write secret content to a private temporary file for the block's duration.

    The file is created with mode 0600 in the system temp directory, flushed
    and fsynced before the path is yielded, and removed when the block exits
    for any reason.

    Args:
        content: Secret text, written verbatim as UTF-8
        suffix: Filename suffix such as ".pem" (may be empty)
        logger: Run logger

    Yields:
        Absolute path of the staged file

    Raises:
        StagingError: If the file cannot be created, written or flushed
    """
    try:
        fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
    except OSError as e:
        raise StagingError(f"Failed to create temporary file: {e}") from e

    path = os.path.abspath(path)
    logger.debug(f"Created temporary file container at: {path}")

    try:
        try:
            handle = os.fdopen(fd, "wb")
        except OSError as e:
            os.close(fd)
            raise StagingError(f"Failed to open temporary file {path}: {e}") from e

        try:
            with handle:
                handle.write(content.encode("utf-8"))
                handle.flush()
                os.fsync(handle.fileno())
        except OSError as e:
            raise StagingError(f"Failed to write secret content to temporary file {path}: {e}") from e
        logger.debug("Wrote and flushed secret content to temporary file.")

        yield path
    finally:
        _remove(path, logger)


def _remove(path: str, logger: logging.Logger) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        # The child removed it already
        logger.debug(f"Temporary file already removed: {path}")
        return
    except OSError as e:
        logger.error(f"Failed to remove temporary file {path}: {e}")
        return
    logger.debug(f"Removed temporary file: {path}")
