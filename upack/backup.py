"""Delete-or-backup handling for destinations that are about to be rewritten."""
import logging
import os
import shutil
from typing import Optional

from .errors import BackupFailed, WriteFailed
from .log import trace

logger = logging.getLogger(__name__)


def remove_path(path: str) -> None:
    """Remove a file, symlink or directory tree; a missing path is fine."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.remove(path)


def make_room(path: str, backup_extension: Optional[str] = None) -> None:
    """Clear ``path`` so the caller can write a fresh copy.

    Without a backup extension the old content is deleted. With one, the
    old content is renamed to ``path + backup_extension``, replacing any
    earlier backup. Nothing existing at ``path`` is not an error.
    """
    if not backup_extension:
        try:
            remove_path(path)
        except OSError as e:
            raise BackupFailed(path, e, action="delete") from e
        return

    if not os.path.lexists(path):
        return
    backup = path + backup_extension
    try:
        remove_path(backup)
        os.rename(path, backup)
    except OSError as e:
        raise BackupFailed(path, e) from e
    trace(logger, "moved %s to %s", path, backup)


def replace_file(path: str, content: bytes,
                 backup_extension: Optional[str] = None) -> None:
    make_room(path, backup_extension)
    try:
        with open(path, "wb") as f:
            f.write(content)
        os.chmod(path, 0o644)
    except OSError as e:
        raise WriteFailed(path, e) from e
    trace(logger, "wrote %s (%d bytes)", path, len(content))
