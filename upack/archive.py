"""Zip extraction and re-creation for AAR and JAR files."""
import logging
import os
import shutil
import stat
import zipfile
import zlib
from collections import namedtuple
from typing import Callable, Iterable, Iterator, List, Optional

from .errors import (
    ArchiveCreateFailed,
    ArchiveOpenFailed,
    EntryReadFailed,
    EntryWriteFailed,
    PathTraversal,
    SourceReadFailed,
)
from .log import trace

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644

TreeEntry = namedtuple("TreeEntry", ["relative_path", "path", "is_dir"])

KeepFn = Callable[[str], bool]


def _open(archive_path: str) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(archive_path, "r")
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveOpenFailed(archive_path, e) from e


def entry_mode(info: zipfile.ZipInfo) -> int:
    mode = stat.S_IMODE(info.external_attr >> 16)
    return mode or DEFAULT_FILE_MODE


def contained_path(dest_dir: str, name: str) -> str:
    """Join ``name`` onto ``dest_dir``; raise if the result leaves it."""
    root = os.path.normpath(os.path.abspath(dest_dir))
    target = os.path.normpath(os.path.join(root, name))
    if not target.startswith(root + os.sep):
        raise PathTraversal(name, root)
    return target


def read_archive_names(archive_path: str) -> List[str]:
    with _open(archive_path) as z:
        return z.namelist()


def extract_archive(archive_path: str, dest_dir: str) -> int:
    """Unpack every entry of ``archive_path`` below ``dest_dir``.

    Returns the number of files written. Entries written before a failure
    are left in place.
    """
    written = 0
    with _open(archive_path) as z:
        for info in z.infolist():
            target = contained_path(dest_dir, info.filename)
            try:
                if info.is_dir():
                    trace(logger, "creating directory %s ...", target)
                    os.makedirs(target, exist_ok=True)
                    continue
                trace(logger, "unzipping file %s ...", target)
                _write_entry(z, info, target)
            except (OSError, zipfile.BadZipFile, zlib.error, EOFError,
                    NotImplementedError, RuntimeError) as e:
                raise EntryWriteFailed(info.filename, e) from e
            written += 1
    return written


def _write_entry(z: zipfile.ZipFile, info: zipfile.ZipInfo, target: str) -> None:
    os.makedirs(os.path.dirname(target), exist_ok=True)
    mode = entry_mode(info)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as dst, z.open(info) as src:
        shutil.copyfileobj(src, dst)
    os.chmod(target, mode)


def walk_tree(root: str) -> Iterator[TreeEntry]:
    """Yield every directory and file under ``root``, parents first.

    Relative paths always use forward slashes. Order follows the
    directory listing.
    """
    return _walk(root, "")


def _walk(directory: str, prefix: str) -> Iterator[TreeEntry]:
    try:
        with os.scandir(directory) as it:
            children = list(it)
    except OSError as e:
        raise SourceReadFailed(directory, e) from e
    for child in children:
        relative = f"{prefix}/{child.name}" if prefix else child.name
        try:
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError as e:
            raise SourceReadFailed(child.path, e) from e
        yield TreeEntry(relative, child.path, is_dir)
        if is_dir:
            yield from _walk(child.path, relative)


def exclusion_filter(substrings: Iterable[str]) -> KeepFn:
    """Return a predicate keeping paths that contain none of ``substrings``."""
    patterns = tuple(s for s in substrings if s)

    def keep(path: str) -> bool:
        return not any(p in path for p in patterns)

    return keep


def build_archive(source_dir: str, archive_path: str,
                  keep: Optional[KeepFn] = None) -> int:
    """Zip the files below ``source_dir`` into ``archive_path``.

    Directories are always descended into but never stored; ``keep`` is
    asked once per file with its forward-slash relative path. Returns the
    number of entries written. An unreadable file aborts the whole build.
    """
    if not os.path.isdir(source_dir):
        raise SourceReadFailed(source_dir, NotADirectoryError(source_dir))
    try:
        z = zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED)
    except OSError as e:
        raise ArchiveCreateFailed(archive_path, e) from e

    count = 0
    with z:
        for entry in walk_tree(source_dir):
            if entry.is_dir:
                continue
            if keep is not None and not keep(entry.relative_path):
                trace(logger, "excluding %s", entry.relative_path)
                continue
            try:
                z.write(entry.path, entry.relative_path)
            except OSError as e:
                raise EntryReadFailed(entry.path, e) from e
            trace(logger, "zipped %s", entry.relative_path)
            count += 1
    return count
