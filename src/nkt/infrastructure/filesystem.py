"""File I/O relative to the root directory.

INVARIANT: every path handed to :class:`FileSystem` is relative to the
root and must resolve inside it; anything else raises ``ValueError``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class FileSystem:
    """Filesystem handle rooted at the nkt root directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def __repr__(self) -> str:
        return f"FileSystem({str(self.root)!r})"

    # ---------------------------------------------------------------------------
    # Path resolution
    # ---------------------------------------------------------------------------

    def resolve(self, path: str) -> Path:
        """Absolute path for root-relative *path*, guarding against escapes."""
        result = self.root / path
        if not result.resolve().is_relative_to(self.root.resolve()):
            msg = f"Path escapes root directory: {path}"
            raise ValueError(msg)
        return result

    # ---------------------------------------------------------------------------
    # File I/O
    # ---------------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def read_text(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def overwrite(self, path: str, content: str) -> None:
        """Replace the file at *path*, creating parent directories."""
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s (%d bytes)", path, len(content))

    def make_dir(self, path: str) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    def move(self, src: str, dst: str) -> None:
        target = self.resolve(dst)
        target.parent.mkdir(parents=True, exist_ok=True)
        self.resolve(src).rename(target)
        logger.debug("Moved %s -> %s", src, dst)

    def remove(self, path: str) -> None:
        self.resolve(path).unlink(missing_ok=True)
        logger.debug("Removed %s", path)

    def remove_dir(self, path: str) -> None:
        """Delete *path* and everything beneath it."""
        target = self.resolve(path)
        if target == self.root.resolve() or target.resolve() == self.root.resolve():
            msg = "Refusing to remove the root directory"
            raise ValueError(msg)
        if target.exists():
            shutil.rmtree(target)
            logger.debug("Removed directory %s", path)

    def bring_in(self, source: Path, dst: str, *, move: bool = False) -> None:
        """Copy (or move) an outside file *source* to root-relative *dst*."""
        target = self.resolve(dst)
        target.parent.mkdir(parents=True, exist_ok=True)
        if move:
            shutil.move(source, target)
        else:
            shutil.copyfile(source, target)
        logger.debug("%s %s -> %s", "Moved" if move else "Copied", source, dst)
