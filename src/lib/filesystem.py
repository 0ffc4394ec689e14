"""
Filesystem collaborators for the minified template cache

DirectoryRead reads source templates; DirectoryWrite owns the
materialization directory the minified copies live in. A cache entry's
path is the source's path relative to the root directory, re-rooted under
the materialization directory:

    root/app/design/view/list.phtml
    -> root/var/view_preprocessed/app/design/view/list.phtml
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .log import LOG


PathLike = Union[str, Path]

TEXT_ERRORS = "surrogateescape"
FILE_MODE = 0o666


def umask_get() -> int:
    """Current process umask (os.umask can only be read by setting it)"""
    umask = os.umask(0)
    os.umask(umask)
    return umask


class DirectoryRead:
    """
    Read access to one directory

    Args:
        path: Directory to read from
    """

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)

    def file_read(self, filename: str) -> Optional[str]:
        """
        Read a file as UTF-8 text

        Args:
            filename: Name relative to this directory

        Returns:
            File content, or None if the file does not exist
        """
        target = self.path / filename
        if not target.is_file():
            LOG(f"Warning: source not found: {target}", level=1)
            return None
        # newline="" keeps CRLF line endings byte-for-byte; bytes that are not
        # UTF-8 survive as lone surrogates and are written back unchanged
        with open(target, "r", encoding="utf-8", errors=TEXT_ERRORS, newline="") as f:
            return f.read()


class DirectoryWrite:
    """
    Write access to the materialization directory

    Args:
        root: Root directory cache keys are relative to
        materialization_dir: Cache directory, absolute or relative to root
    """

    def __init__(self, root: PathLike, materialization_dir: PathLike) -> None:
        self.root = self.path_resolve(root)
        self.path = self.root / materialization_dir

    def path_resolve(self, path: PathLike) -> Path:
        """Canonical absolute path with symlinks resolved"""
        return Path(os.path.realpath(path))

    def path_relative(self, path: PathLike) -> Path:
        """
        Path of a source relative to the root directory

        Raises:
            ValueError: If the path lies outside the root
        """
        return Path(path).relative_to(self.root)

    def path_absolute(self, relative: Optional[PathLike] = None) -> Path:
        """Absolute path of a cache entry (or of the directory itself)"""
        if relative is None:
            return self.path
        return self.path / relative

    def exists(self, relative: Optional[PathLike] = None) -> bool:
        """Whether a cache entry (or the directory itself) exists"""
        return self.path_absolute(relative).exists()

    def create(self) -> None:
        """Create the materialization directory"""
        self.path.mkdir(parents=True, exist_ok=True)
        LOG(f"Created {self.path}", level=2)

    def file_write(self, relative: PathLike, content: str) -> Path:
        """
        Write a cache entry in one piece

        The text goes to a temporary file next to the target which is then
        renamed over it, so readers never observe a partial file.

        Args:
            relative: Entry path relative to the materialization directory
            content: Text to write

        Returns:
            Absolute path written
        """
        destination = self.path_absolute(relative)
        destination.parent.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            errors=TEXT_ERRORS,
            newline="",
            dir=str(destination.parent),
            prefix=f".{destination.name}.",
            delete=False,
        )
        temp_name = handle.name
        try:
            with handle:
                handle.write(content)
            # NamedTemporaryFile creates 0600; entries get the usual umask mode
            os.chmod(temp_name, FILE_MODE & ~umask_get())
            os.replace(temp_name, destination)
        finally:
            if os.path.exists(temp_name):
                os.remove(temp_name)
        LOG(f"Wrote {destination}", level=3)
        return destination
