"""
Local disk storage for report photos.

Files live in one flat directory, named after the submission time in epoch
milliseconds plus the original extension (1718000000000.jpg). The same
directory is mounted read-only at /uploads by app.main.
"""

import logging
import os
import shutil
import time
from typing import BinaryIO, Callable, Optional

logger = logging.getLogger(__name__)


class UploadStorage:
    """
    Save uploaded files under generated names and map them to public paths.
    """

    def __init__(
        self,
        directory: str,
        url_prefix: str = "/uploads",
        clock: Callable[[], float] = time.time,
    ):
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")
        self._clock = clock

    def ensure_directory(self) -> None:
        os.makedirs(self.directory, exist_ok=True)

    @staticmethod
    def extension_of(filename: Optional[str]) -> str:
        """Extension of the client filename including the dot, or '' if none."""
        if not filename:
            return ""
        base = os.path.basename(filename.replace("\\", "/"))
        return os.path.splitext(base)[1]

    def save(self, filename: Optional[str], stream: BinaryIO) -> str:
        """
        Write stream to a new file and return its public path.

        The name is taken from the current time; if another upload already
        holds that millisecond, the next free one is used.
        """
        self.ensure_directory()
        extension = self.extension_of(filename)
        millis = int(self._clock() * 1000)

        while True:
            stored_name = f"{millis}{extension}"
            target = os.path.join(self.directory, stored_name)
            try:
                out = open(target, "xb")
            except FileExistsError:
                millis += 1
                continue

            # A partial file must not stay in the served directory
            try:
                with out:
                    shutil.copyfileobj(stream, out)
            except BaseException:
                os.remove(target)
                logger.error(f"Failed to store upload {filename!r}, removed partial {stored_name}")
                raise
            break

        logger.info(f"Stored upload {filename!r} as {stored_name}")
        return f"{self.url_prefix}/{stored_name}"

    def path_for(self, public_path: str) -> str:
        """Filesystem path of a file previously returned by save()."""
        return os.path.join(self.directory, os.path.basename(public_path))

    def delete(self, public_path: str) -> None:
        try:
            os.remove(self.path_for(public_path))
            logger.info(f"Removed upload {public_path}")
        except FileNotFoundError:
            pass
